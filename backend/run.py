import os

from pickup import create_app, relay, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    try:
        socketio.run(app, host='0.0.0.0', port=int(os.environ.get('PORT', '8080')), debug=True)
    finally:
        relay.shutdown()
