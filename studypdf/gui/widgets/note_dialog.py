from __future__ import annotations

from typing import Optional

from qtpy import QtCore, QtWidgets


class NoteDialog(QtWidgets.QDialog):
    """Modal editor for the free-text note attached to a highlight."""

    def __init__(
        self,
        initial: str = "",
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Highlight note")
        self.setModal(True)

        self.text_edit = QtWidgets.QPlainTextEdit(self)
        self.text_edit.setPlaceholderText("Add a note (optional)…")
        self.text_edit.setPlainText(initial or "")

        self.button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel,
            QtCore.Qt.Horizontal,
            self,
        )
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)

        layout = QtWidgets.QVBoxLayout(self)
        layout.addWidget(self.text_edit)
        layout.addWidget(self.button_box)
        self.text_edit.setFocus()

    def note_text(self) -> str:
        return self.text_edit.toPlainText()


def edit_note(parent: Optional[QtWidgets.QWidget] = None, initial: str = "") -> Optional[str]:
    """Run the note dialog; returns the text on Save and None on Cancel."""
    dialog = NoteDialog(initial, parent)
    if dialog.exec_() == QtWidgets.QDialog.Accepted:
        return dialog.note_text()
    return None


def confirm_delete_highlight(parent: Optional[QtWidgets.QWidget] = None) -> bool:
    answer = QtWidgets.QMessageBox.question(
        parent,
        "Delete highlight",
        "Delete this highlight?",
        QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
        QtWidgets.QMessageBox.No,
    )
    return answer == QtWidgets.QMessageBox.Yes
