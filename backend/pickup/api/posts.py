from flask import Blueprint, jsonify, request

from pickup.services.posts import create_post as svc_create_post
from pickup.services.posts import list_posts as svc_list_posts


posts = Blueprint('posts', __name__)


@posts.route('', methods=['GET'])
def list_posts():
    return jsonify([post.to_dict() for post in svc_list_posts()])


@posts.route('', methods=['POST'])
def create_post():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    return jsonify(svc_create_post(data).to_dict()), 201
