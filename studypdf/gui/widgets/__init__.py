from studypdf.gui.widgets.note_dialog import (
    NoteDialog,
    confirm_delete_highlight,
    edit_note,
)

__all__ = [
    "NoteDialog",
    "confirm_delete_highlight",
    "edit_note",
]
