from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..schemas import TaskOut
from .board import TaskBoard

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Type a task and press Enter to add it.\n"
    "  /toggle N   mark task N done / not done\n"
    "  /delete N   delete task N\n"
    "  /reload     fetch the list from the server again\n"
    "  /help       show this help\n"
    "  /exit       quit"
)


def render_tasks(tasks: List[TaskOut]) -> str:
    if not tasks:
        return "(no tasks)"
    lines = []
    for i, task in enumerate(tasks, start=1):
        mark = "x" if task.completed else " "
        lines.append(f"{i:>3}. [{mark}] {task.text}")
    return "\n".join(lines)


def _task_at(board: TaskBoard, arg: str) -> Optional[TaskOut]:
    try:
        index = int(arg)
    except ValueError:
        return None
    if 1 <= index <= len(board.tasks):
        return board.tasks[index - 1]
    return None


# PUBLIC_INTERFACE
def handle_line(board: TaskBoard, line: str, emit: Callable[[str], None] = print) -> bool:
    """
    Apply one line of console input to the board.

    Returns False when the user asked to quit, True otherwise.
    """
    line = line.strip()
    if not line:
        return True

    if not line.startswith("/"):
        board.set_draft(line)
        if not board.submit():
            emit("Could not add task.")
        return True

    command, _, arg = line[1:].partition(" ")
    command = command.lower()
    arg = arg.strip()

    if command in ("exit", "quit"):
        return False
    if command == "help":
        emit(HELP_TEXT)
    elif command == "reload":
        if not board.load():
            emit("Could not load tasks.")
    elif command in ("toggle", "delete"):
        task = _task_at(board, arg)
        if task is None:
            emit(f"No task number {arg!r}.")
        elif command == "toggle" and not board.toggle(task.id):
            emit("Update failed, change reverted.")
        elif command == "delete" and not board.remove(task.id):
            emit("Delete failed, change reverted.")
    else:
        emit(f"Unknown command /{command}. Use /help.")
    return True


# PUBLIC_INTERFACE
def run_console_loop(board: TaskBoard, emit: Callable[[str], None] = print) -> None:
    """
    Interactive loop: load the list, then read commands until /exit or EOF.
    The board's change listener is expected to re-render the list.
    """
    logger.info("Console client started")
    emit(HELP_TEXT)
    if not board.load():
        emit("Could not load tasks.")

    while True:
        try:
            line = input("> ")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            emit("")
            break
        if not handle_line(board, line, emit=emit):
            break
