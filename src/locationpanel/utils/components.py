# src/locationpanel/utils/components.py

"""
Custom Qt Widget Components for LocationPanel.

Provides the MasterSwitch toggle used for the location on/off control.
"""

from typing import Final, Optional

from PyQt6.QtCore import QEasingCurve, QPoint, QPropertyAnimation, QSize, Qt, pyqtSignal
from PyQt6.QtWidgets import QCheckBox, QHBoxLayout, QSizePolicy, QWidget


def toggle_style(total_track_width: int, total_track_height: int, accent: str = "#1A73E8") -> str:
    """Style for the QCheckBox acting as the track in MasterSwitch."""
    track_border_width = 1
    indicator_width = max(0, total_track_width - (2 * track_border_width))
    indicator_height = max(0, total_track_height - (2 * track_border_width))
    return f"""
        QCheckBox {{
            background-color: transparent;
            border: none; outline: none;
            padding: 0px; margin: 0px; spacing: 0px;
        }}
        QCheckBox::indicator {{
            width: {indicator_width}px;
            height: {indicator_height}px;
            background-color: #9E9E9E;
            border-radius: {total_track_height // 2}px;
            border: {track_border_width}px solid #B0B0B0;
        }}
        QCheckBox::indicator:checked {{
            background-color: {accent};
            border: {track_border_width}px solid {accent};
        }}
        QCheckBox::indicator:disabled {{
            background-color: #D0D0D0;
            border: {track_border_width}px solid #D0D0D0;
        }}
    """


class MasterSwitch(QWidget):
    """
    A compact toggle switch.

    `toggled` fires for user clicks and for `setChecked()` calls alike, the way a
    platform switch does; owners that write the checked state themselves must
    guard against their own writes.
    """
    toggled = pyqtSignal(bool)

    _OUTER_TRACK_WIDTH: Final[int] = 40
    _OUTER_TRACK_HEIGHT: Final[int] = 20
    _THUMB_DIAMETER: Final[int] = 14

    _THUMB_TRAVEL_PADDING: Final[int] = (_OUTER_TRACK_HEIGHT - _THUMB_DIAMETER) // 2

    _START_X_POS: Final[int] = _THUMB_TRAVEL_PADDING
    _END_X_POS: Final[int] = _OUTER_TRACK_WIDTH - _THUMB_DIAMETER - _THUMB_TRAVEL_PADDING

    def __init__(self, initial_state: bool = False, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._is_checked: bool = initial_state

        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet("background-color: transparent; border: none; outline: none;")
        self.setSizePolicy(QSizePolicy.Policy.Maximum, QSizePolicy.Policy.Preferred)
        self._setup_ui()

        self.checkbox.blockSignals(True)
        self.checkbox.setChecked(self._is_checked)
        self.checkbox.blockSignals(False)
        self._update_thumb_position(animate=False)

    def _setup_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.toggle_visual_container = QWidget(self)
        self.toggle_visual_container.setFixedSize(self._OUTER_TRACK_WIDTH, self._OUTER_TRACK_HEIGHT)

        self.checkbox = QCheckBox(self.toggle_visual_container)
        self.checkbox.setFixedSize(self._OUTER_TRACK_WIDTH, self._OUTER_TRACK_HEIGHT)
        self.checkbox.setCursor(Qt.CursorShape.PointingHandCursor)
        self.checkbox.setStyleSheet(toggle_style(self._OUTER_TRACK_WIDTH, self._OUTER_TRACK_HEIGHT))

        self.thumb = QWidget(self.toggle_visual_container)
        self.thumb.setFixedSize(self._THUMB_DIAMETER, self._THUMB_DIAMETER)
        self.thumb.setStyleSheet(f"""
            QWidget {{
                background-color: white;
                border-radius: {self._THUMB_DIAMETER // 2}px;
                border: 1px solid #B0B0B0;
            }}
        """)
        self.thumb.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)

        self.thumb_animation = QPropertyAnimation(self.thumb, b"pos", self)
        self.thumb_animation.setDuration(120)
        self.thumb_animation.setEasingCurve(QEasingCurve.Type.InOutSine)

        self.checkbox.toggled.connect(self._on_checkbox_toggled)
        layout.addWidget(self.toggle_visual_container)

    def _update_thumb_position(self, animate: bool = True) -> None:
        target_x = self._END_X_POS if self._is_checked else self._START_X_POS
        end_pos = QPoint(target_x, self._THUMB_TRAVEL_PADDING)
        current_pos = self.thumb.pos()

        if current_pos == end_pos and self.thumb_animation.state() != QPropertyAnimation.State.Running:
            return
        self.thumb_animation.stop()
        if animate:
            self.thumb_animation.setStartValue(current_pos)
            self.thumb_animation.setEndValue(end_pos)
            self.thumb_animation.start()
        else:
            self.thumb.move(end_pos)

    def _on_checkbox_toggled(self, checked: bool) -> None:
        if self._is_checked == checked:
            return
        self._is_checked = checked
        self._update_thumb_position(animate=True)
        self.toggled.emit(self._is_checked)

    def isChecked(self) -> bool:
        return self._is_checked

    def setChecked(self, checked: bool) -> None:
        if self._is_checked == checked:
            self._update_thumb_position(animate=False)
            return
        self._is_checked = checked
        self.checkbox.blockSignals(True)
        self.checkbox.setChecked(self._is_checked)
        self.checkbox.blockSignals(False)
        self._update_thumb_position(animate=False)
        self.toggled.emit(self._is_checked)

    def sizeHint(self) -> QSize:
        return QSize(self._OUTER_TRACK_WIDTH, self._OUTER_TRACK_HEIGHT)
