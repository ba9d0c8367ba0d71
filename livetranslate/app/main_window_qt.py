from __future__ import annotations

from livetranslate.app.state import UIState
from livetranslate.languages import LANGUAGES

OUTPUT_PLACEHOLDER = "Your translation will appear here..."
LOADING_TEXT = "Translating..."

try:
    from PyQt6 import QtCore, QtWidgets

    _PYQT_IMPORT_ERROR: ModuleNotFoundError | None = None
except ModuleNotFoundError as e:  # pragma: no cover - import guard path
    QtCore = None  # type: ignore[assignment]
    QtWidgets = None  # type: ignore[assignment]
    _PYQT_IMPORT_ERROR = e


def output_text_for(state: UIState) -> str:
    if state.is_loading:
        return LOADING_TEXT
    return state.translated_text or OUTPUT_PLACEHOLDER


if QtWidgets is not None:
    class TranslatorWindow(QtWidgets.QMainWindow):
        text_edited = QtCore.pyqtSignal(str)
        speak_requested = QtCore.pyqtSignal()
        source_lang_selected = QtCore.pyqtSignal(str)
        target_lang_selected = QtCore.pyqtSignal(str)

        def __init__(self) -> None:
            super().__init__()
            self.setWindowTitle("LiveTranslate")
            self.resize(640, 480)

            root = QtWidgets.QWidget(self)
            self.setCentralWidget(root)
            lay = QtWidgets.QVBoxLayout(root)
            lay.setContentsMargins(22, 20, 22, 20)
            lay.setSpacing(12)

            title = QtWidgets.QLabel("TRANSLATOR", root)
            title.setObjectName("title")
            lay.addWidget(title)

            hint = QtWidgets.QLabel('Type text, or click "Speak" to use your voice.', root)
            hint.setObjectName("hint")
            lay.addWidget(hint)

            input_row = QtWidgets.QHBoxLayout()
            self.input = QtWidgets.QLineEdit(root)
            self.input.setPlaceholderText("Enter text to translate")
            self.btn_speak = QtWidgets.QPushButton("Speak", root)
            self.btn_speak.setObjectName("primary")
            input_row.addWidget(self.input, 1)
            input_row.addWidget(self.btn_speak)
            lay.addLayout(input_row)

            self.error_label = QtWidgets.QLabel("", root)
            self.error_label.setObjectName("error")
            self.error_label.setWordWrap(True)
            self.error_label.hide()
            lay.addWidget(self.error_label)

            form = QtWidgets.QFormLayout()
            self.source_combo = QtWidgets.QComboBox(root)
            self.target_combo = QtWidgets.QComboBox(root)
            for lang in LANGUAGES.values():
                self.source_combo.addItem(lang.name, lang.code)
                self.target_combo.addItem(lang.name, lang.code)
            form.addRow("Input Language:", self.source_combo)
            form.addRow("Translation Language:", self.target_combo)
            lay.addLayout(form)

            out_title = QtWidgets.QLabel("Translation:", root)
            out_title.setObjectName("subhead")
            lay.addWidget(out_title)
            self.output = QtWidgets.QPlainTextEdit(root)
            self.output.setReadOnly(True)
            lay.addWidget(self.output, 1)

            # textEdited / activated fire only for user actions, not for render().
            self.input.textEdited.connect(self.text_edited.emit)
            self.btn_speak.clicked.connect(self.speak_requested.emit)
            self.source_combo.activated.connect(
                lambda idx: self.source_lang_selected.emit(str(self.source_combo.itemData(idx)))
            )
            self.target_combo.activated.connect(
                lambda idx: self.target_lang_selected.emit(str(self.target_combo.itemData(idx)))
            )

            self.setStyleSheet(
                """
                QMainWindow { background: #121416; color: #e8ecef; }
                QLabel { color: #e8ecef; }
                QLabel#title { font-size: 28px; font-weight: 700; letter-spacing: 0.3px; }
                QLabel#hint { color: #a7b0b8; font-size: 12px; }
                QLabel#subhead { color: #b8c1c8; font-size: 12px; font-weight: 600; }
                QLabel#error { color: #ff8a80; font-size: 12px; }
                QLineEdit, QPlainTextEdit, QComboBox {
                    background: #1a1e22;
                    border: 1px solid #2a3138;
                    border-radius: 8px;
                    color: #e7edf3;
                    padding: 6px;
                }
                QPushButton {
                    background: #22272d;
                    border: 1px solid #313840;
                    border-radius: 10px;
                    color: #e7edf3;
                    padding: 8px 16px;
                    font-weight: 600;
                }
                QPushButton#primary { background: #c8f25f; color: #172005; border-color: #c8f25f; }
                QPushButton#primary:hover { background: #d3f67f; border-color: #d3f67f; }
                """
            )

        def render(self, state: UIState) -> None:
            if self.input.text() != state.input_text:
                self.input.setText(state.input_text)
            self.btn_speak.setText("Listening... (stop)" if state.is_listening else "Speak")
            self.error_label.setText(state.error_message)
            self.error_label.setVisible(bool(state.error_message))
            self._select(self.source_combo, state.source_lang)
            self._select(self.target_combo, state.target_lang)
            text = output_text_for(state)
            if self.output.toPlainText() != text:
                self.output.setPlainText(text)

        def scroll_output_to_bottom(self) -> None:
            bar = self.output.verticalScrollBar()
            bar.setValue(bar.maximum())

        @staticmethod
        def _select(combo, code: str) -> None:
            idx = combo.findData(code)
            if idx >= 0 and idx != combo.currentIndex():
                combo.setCurrentIndex(idx)
else:
    class TranslatorWindow:
        def __init__(self) -> None:
            raise ModuleNotFoundError(
                "PyQt6 is required for TranslatorWindow. Install with: python -m pip install PyQt6"
            ) from _PYQT_IMPORT_ERROR
