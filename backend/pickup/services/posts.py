from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from pickup import db
from pickup.exceptions import StoreUnavailable
from pickup.models import Post, optional_str


def list_posts():
    try:
        return Post.query.order_by(Post.created_at.desc(), Post.id.desc()).all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[posts] list failed: {exc}")
        raise StoreUnavailable('Error fetching posts') from exc


def create_post(data: dict) -> Post:
    author = data.get('author') or {}
    if not isinstance(author, dict):
        author = {}
    post = Post(
        title=data.get('title'),
        caption=data.get('caption'),
        image=data.get('image'),
        author_id=optional_str(author.get('id')),
        author_name=optional_str(author.get('name')),
    )
    try:
        db.session.add(post)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[posts] create failed: {exc}")
        raise StoreUnavailable('Error creating post') from exc
    current_app.logger.info(f"[posts] created post={post.id} author={post.author_id}")
    return post
