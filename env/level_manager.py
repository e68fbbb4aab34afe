import logging

from env.board import BOARDS
from env.board_parser import parse_board, MalformedBoard
from env.board_validator import validate_board

log = logging.getLogger(__name__)


class LevelManager:
    """Parses and validates every board once and hands them out per level."""

    def __init__(self, definitions=None):
        self.definitions = list(BOARDS if definitions is None else definitions)
        self.boards = []
        self.reports = {}
        for definition in self.definitions:
            try:
                board = parse_board(definition)
            except MalformedBoard as e:
                log.error("Board %r parse error: %s", definition.name, e)
                self.boards.append(None)
                continue
            result = validate_board(board, definition.name)
            self.reports[definition.name] = result
            if result.valid:
                self.boards.append(board)
            else:
                log.error("Board %r failed validation, using fallback", definition.name)
                self.boards.append(None)

    @property
    def board_count(self):
        return len(self.boards)

    def board_for_level(self, level):
        """Levels start at 1 and cycle through the boards."""
        if self.boards:
            board = self.boards[(level - 1) % len(self.boards)]
            if board is not None:
                return board
        for board in self.boards:
            if board is not None:
                return board
        raise RuntimeError("No valid boards available")

    def board_name(self, level):
        return self.definitions[(level - 1) % len(self.definitions)].name
