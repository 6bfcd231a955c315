"""
API server for the song library.
Exposes a viewer's library, detail overlay and now-playing track to web
frontends, and pushes track changes over Socket.IO.
"""

import logging
from typing import Optional

from flask import Flask, request, jsonify, redirect, session
from flask_socketio import SocketIO, join_room
from flask_cors import CORS

from shared import config
from shared.config import StorageConfig
from shared.constants import (
    EMPTY_STATE_MESSAGE,
    EMPTY_STATE_TITLE,
    LIBRARY_SUBTITLE,
    LIBRARY_TITLE,
    VIEWER_HEADER,
    VIEWER_SESSION_KEY,
)
from shared.errors import SongNotFoundError, SongQueryError, ViewerRequiredError
from library.grid import card_summary
from library.repository import JsonSongRepository
from library.session import LibrarySession, SessionRegistry
from storage.provider_factory import SignerFactory
from storage.resolver import MediaURLResolver

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = config.SECRET_KEY
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*")

registry: Optional[SessionRegistry] = None


def viewer_room(viewer_id: str) -> str:
    return f"viewer:{viewer_id}"


def build_registry() -> SessionRegistry:
    """Sessions backed by the configured songs file and media signer."""
    storage = StorageConfig.from_env()
    signer = SignerFactory.from_config(storage)
    resolver = MediaURLResolver(signer, expires_in=storage.url_expires_in)
    repository = JsonSongRepository(config.SONGS_FILE)

    def make_session(viewer_id: str) -> LibrarySession:
        # Downloads are opened by the browser through a redirect, not server side.
        lib_session = LibrarySession(viewer_id, repository, resolver, opener=lambda url: None)
        lib_session.store.subscribe(
            lambda track: socketio.emit(
                'track_changed',
                track.to_dict() if track else None,
                room=viewer_room(viewer_id),
            )
        )
        return lib_session

    return SessionRegistry(make_session)


def get_registry() -> SessionRegistry:
    global registry
    if registry is None:
        logger.info("API: Initializing session registry...")
        registry = build_registry()
    return registry


def set_registry(new_registry: Optional[SessionRegistry]) -> None:
    global registry
    registry = new_registry


def viewer_from_request() -> str:
    """Resolve the viewer from the header or the Flask session."""
    viewer_id = request.headers.get(VIEWER_HEADER) or session.get(VIEWER_SESSION_KEY)
    if not viewer_id:
        raise ViewerRequiredError("Sign in required")
    return viewer_id


def current_session() -> LibrarySession:
    return get_registry().get(viewer_from_request())


@app.errorhandler(ViewerRequiredError)
def handle_unauthenticated(e):
    return jsonify({"error": str(e), "redirect": "/auth/sign-in"}), 401


@app.errorhandler(SongNotFoundError)
def handle_song_not_found(e):
    return jsonify({"error": str(e)}), 404


@app.errorhandler(SongQueryError)
def handle_query_failure(e):
    logger.error("Song query failed: %s", e)
    return jsonify({"error": "Library unavailable"}), 503


@socketio.on('library_register')
def on_library_register(data=None):
    """Join the requesting viewer's room to receive track_changed events."""
    try:
        viewer_id = viewer_from_request()
    except ViewerRequiredError:
        logger.warning("Socket %s tried to register without a viewer", request.sid)
        return {"ok": False, "error": "Sign in required"}
    join_room(viewer_room(viewer_id))
    return {"ok": True, "viewer_id": viewer_id}


@app.route('/api/health')
def health_check():
    return jsonify({"status": "healthy"})


@app.route('/api/library', methods=['GET'])
async def get_library():
    lib_session = current_session()
    grid = await lib_session.ensure_loaded()
    payload = {
        "title": LIBRARY_TITLE,
        "subtitle": LIBRARY_SUBTITLE,
        "empty": grid.is_empty,
        "songs": [song.to_dict() for song in grid.songs],
        "cards": [
            {**card_summary(card.song), "state": card.state.value}
            for card in grid.cards()
        ],
    }
    if grid.is_empty:
        payload["empty_state"] = {"title": EMPTY_STATE_TITLE, "message": EMPTY_STATE_MESSAGE}
    detail = grid.detail
    payload["detail"] = detail.to_dict() if detail else None
    return jsonify(payload)


@app.route('/api/library/refresh', methods=['POST'])
async def refresh_library():
    grid = await current_session().refresh()
    return jsonify({"status": "success", "count": len(grid.songs)})


@app.route('/api/library/detail/<song_id>', methods=['POST'])
async def open_detail(song_id):
    grid = await current_session().ensure_loaded()
    overlay = grid.open_detail(song_id)
    return jsonify(overlay.to_dict())


@app.route('/api/library/detail', methods=['DELETE'])
async def close_detail():
    grid = await current_session().ensure_loaded()
    grid.close_detail()
    return jsonify({"status": "closed"})


@app.route('/api/library/songs/<song_id>/play', methods=['POST'])
async def play_song(song_id):
    grid = await current_session().ensure_loaded()
    card = grid.card(song_id)
    track = await card.play()
    if track is None:
        if card.last_error is not None:
            return jsonify({"error": str(card.last_error), "state": card.state.value}), 502
        return jsonify({"status": "busy", "state": card.state.value}), 409
    return jsonify({"track": track.to_dict(), "state": card.state.value})


@app.route('/api/library/songs/<song_id>/download', methods=['GET'])
async def download_song(song_id):
    grid = await current_session().ensure_loaded()
    url = await grid.card(song_id).download()
    if not url:
        return jsonify({"error": "Download unavailable"}), 502
    return redirect(url)


@app.route('/api/playback/current', methods=['GET'])
def playback_current():
    track = current_session().store.get_track()
    if track is None:
        return '', 204
    return jsonify(track.to_dict())


@app.route('/api/session', methods=['DELETE'])
def end_session():
    ended = get_registry().end(viewer_from_request())
    session.pop(VIEWER_SESSION_KEY, None)
    return jsonify({"status": "ended" if ended else "none"})


def start_api(host: str = config.API_HOST, port: int = config.API_PORT, debug: bool = False):
    logger.info("Soundgrid API listening on %s:%s", host, port)
    get_registry()
    socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    start_api()
