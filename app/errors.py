"""Domain error types and their JSON error handlers.

Services raise these; register_error_handlers() maps each kind to an
HTTP status so blueprints don't need try/except around every call.

    ContainerNotFound       404  (board, section) pairing never provisioned
    ItemNotFound            404  card id does not exist
    ConcurrentModification  503  shift lost a race on every retry attempt
    PersistenceFailure      500  store unreachable or write rejected
"""

import logging

from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class BoardError(Exception):
    """Base class for errors surfaced by the ordering services."""

    status_code = 500
    retryable = False

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class ContainerNotFound(BoardError):
    """Board section not found."""

    status_code = 404

    def __init__(self, board_id=None, section_id=None, container_id=None):
        if container_id is not None:
            message = f"Board section {container_id} not found."
        else:
            message = (
                f"Section {section_id} is not provisioned on board {board_id}."
            )
        super().__init__(message)
        self.board_id = board_id
        self.section_id = section_id
        self.container_id = container_id


class ItemNotFound(BoardError):
    """Card not found."""

    status_code = 404

    def __init__(self, item_id):
        super().__init__(f"Card {item_id} not found.")
        self.item_id = item_id


class ConcurrentModification(BoardError):
    """The board section was modified concurrently. Please retry."""

    status_code = 503
    retryable = True


class PersistenceFailure(BoardError):
    """The change could not be saved."""

    status_code = 500


def register_error_handlers(app):
    """Answer domain and HTTP errors with the JSON envelope."""
    from app.responses import fail

    @app.errorhandler(BoardError)
    def handle_board_error(e):
        if e.status_code >= 500:
            logger.error(f"{e.__class__.__name__}: {e.message}")
        return fail(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return fail(e.description, e.code)

    @app.errorhandler(500)
    def server_error(e):
        return fail("Internal server error.", 500)
