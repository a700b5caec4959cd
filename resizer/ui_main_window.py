# resizer/ui_main_window.py
# Desktop shell for the image resizer:
# - drag & drop or browse for one image
# - live preview re-rendered on every parameter change, at the screen's pixel ratio
# - eyedropper picks the background color from the preview
# - presets list (save / apply / delete), persisted between sessions
# - decode and encode run in QThread workers so the UI never blocks

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QObject, Qt, QThread, Signal
from PySide6.QtGui import QColor, QImage, QPixmap, QTextCursor
from PySide6.QtWidgets import (
    QColorDialog,
    QComboBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSpinBox,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from resizer.config import APP_NAME, LOGGER_NAME, MAX_DIMENSION, MIN_DIMENSION, STORAGE_PATH
from resizer.controllers.session_controller import ResizerSession
from resizer.imaging.compositor import RasterSurface
from resizer.models.enums import BackgroundMode, ExportFormat, FitMode
from resizer.storage.kv_store import JsonFileStore
from resizer.utils.logging_utils import QtTailHandler
from resizer.workers.codec_worker import DecodeWorker, EncodeWorker

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.bmp *.gif *.tif *.tiff);;All Files (*.*)"


# --------------------------- Logging Bridge ---------------------------
class QtLogEmitter(QObject):
    """Signal emitter so worker-thread log records reach the UI thread"""

    message = Signal(str)


def surface_to_pixmap(surface: RasterSurface) -> QPixmap:
    im = surface.display_image
    data = im.tobytes("raw", "RGBA")
    qimg = QImage(data, im.width, im.height, im.width * 4, QImage.Format.Format_RGBA8888).copy()
    pixmap = QPixmap.fromImage(qimg)
    pixmap.setDevicePixelRatio(surface.pixel_density)
    return pixmap


# --------------------------- Canvas ---------------------------
class CanvasView(QLabel):
    """Preview surface: shows the rendered canvas, accepts drops, reports clicks."""

    file_dropped = Signal(str)
    clicked = Signal(float, float)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setMinimumSize(320, 220)
        self.setText("Drop an image here\n\nor use Browse…")
        self.setStyleSheet("QLabel { border: 2px dashed #555; color: #888; }")

    def show_surface(self, surface: RasterSurface) -> None:
        self.setStyleSheet("")
        self.setPixmap(surface_to_pixmap(surface))
        # widget size == logical canvas size, so click positions are logical coordinates
        self.setFixedSize(surface.width, surface.height)

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event):
        urls = event.mimeData().urls()
        if urls and urls[0].isLocalFile():
            self.file_dropped.emit(urls[0].toLocalFile())
            event.acceptProposedAction()

    def mousePressEvent(self, event):
        pos = event.position()
        self.clicked.emit(pos.x(), pos.y())
        super().mousePressEvent(event)


# --------------------------- Main Window ---------------------------
class MainWindow(QMainWindow):
    def __init__(self, storage_path: Path = STORAGE_PATH):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} – Fit & Export")
        self.resize(1280, 820)

        self.session = ResizerSession(JsonFileStore(storage_path), pixel_density=self.devicePixelRatioF())
        self.session.add_render_listener(self._on_rendered)
        self._workers: List[QThread] = []

        self._build_ui()
        self._install_logging_bridge()
        self._sync_controls()
        self._refresh_presets()
        self.session.render()

    # ---------------------- UI ----------------------
    def _build_ui(self) -> None:
        root = QWidget()
        layout = QHBoxLayout(root)

        # left: controls
        controls = QVBoxLayout()

        src_box = QGroupBox("Image")
        src_lay = QVBoxLayout(src_box)
        self.browse_btn = QPushButton("Browse…")
        self.browse_btn.clicked.connect(self._browse_input)
        self.source_label = QLabel("No image loaded")
        src_lay.addWidget(self.browse_btn)
        src_lay.addWidget(self.source_label)
        controls.addWidget(src_box)

        tgt_box = QGroupBox("Target")
        form = QFormLayout(tgt_box)
        self.width_spin = QSpinBox()
        self.height_spin = QSpinBox()
        for spin in (self.width_spin, self.height_spin):
            spin.setRange(MIN_DIMENSION, MAX_DIMENSION)
            spin.setSuffix(" px")
            spin.setKeyboardTracking(False)
        self.width_spin.valueChanged.connect(lambda v: self.session.update(width=v))
        self.height_spin.valueChanged.connect(lambda v: self.session.update(height=v))
        form.addRow("Width", self.width_spin)
        form.addRow("Height", self.height_spin)

        self.format_combo = QComboBox()
        for fmt in ExportFormat:
            self.format_combo.addItem(fmt.label, fmt)
        self.format_combo.currentIndexChanged.connect(
            lambda _i: self.session.update(format=self.format_combo.currentData())
        )
        form.addRow("Format", self.format_combo)

        self.fit_combo = QComboBox()
        self.fit_combo.addItem("Fit (letterbox)", FitMode.FIT)
        self.fit_combo.addItem("Fill (crop)", FitMode.FILL)
        self.fit_combo.currentIndexChanged.connect(
            lambda _i: self.session.update(fit_mode=self.fit_combo.currentData())
        )
        form.addRow("Aspect", self.fit_combo)

        self.bg_combo = QComboBox()
        self.bg_combo.addItem("Transparent", BackgroundMode.TRANSPARENT)
        self.bg_combo.addItem("Color", BackgroundMode.COLOR)
        self.bg_combo.currentIndexChanged.connect(
            lambda _i: self.session.update(background_mode=self.bg_combo.currentData())
        )
        form.addRow("Background", self.bg_combo)

        self.color_btn = QPushButton()
        self.color_btn.clicked.connect(self._choose_color)
        self.eyedropper_btn = QPushButton("Pick from canvas")
        self.eyedropper_btn.setCheckable(True)
        self.eyedropper_btn.toggled.connect(self._toggle_eyedropper)
        form.addRow("Color", self._hbox(self.color_btn, self.eyedropper_btn))
        controls.addWidget(tgt_box)

        preset_box = QGroupBox("Presets")
        p_lay = QVBoxLayout(preset_box)
        self.preset_list = QListWidget()
        self.preset_list.itemDoubleClicked.connect(lambda _item: self._apply_selected_preset())
        p_lay.addWidget(self.preset_list)
        apply_btn = QPushButton("Apply")
        apply_btn.clicked.connect(self._apply_selected_preset)
        delete_btn = QPushButton("Delete")
        delete_btn.clicked.connect(self._delete_selected_preset)
        p_lay.addWidget(self._hbox(apply_btn, delete_btn))
        self.preset_name_edit = QLineEdit()
        self.preset_name_edit.setPlaceholderText("Preset name")
        self.preset_name_edit.returnPressed.connect(self._save_preset)
        save_btn = QPushButton("Save")
        save_btn.clicked.connect(self._save_preset)
        p_lay.addWidget(self._hbox(self.preset_name_edit, save_btn))
        controls.addWidget(preset_box)

        self.export_btn = QPushButton("Export…")
        self.export_btn.setEnabled(False)
        self.export_btn.clicked.connect(self._export)
        controls.addWidget(self.export_btn)

        self.log_edit = QTextEdit()
        self.log_edit.setReadOnly(True)
        self.log_edit.setMaximumHeight(160)
        controls.addWidget(self.log_edit)
        controls.addStretch(1)

        # right: canvas
        self.canvas = CanvasView()
        self.canvas.file_dropped.connect(self._load_path)
        self.canvas.clicked.connect(self._on_canvas_click)
        scroll = QScrollArea()
        scroll.setAlignment(Qt.AlignmentFlag.AlignCenter)
        scroll.setWidget(self.canvas)
        scroll.setAcceptDrops(False)

        left = QWidget()
        left.setLayout(controls)
        left.setFixedWidth(360)
        layout.addWidget(left)
        layout.addWidget(scroll, 1)
        self.setCentralWidget(root)
        self.statusBar().showMessage("Ready")

    def _hbox(self, *widgets: QWidget) -> QWidget:
        w = QWidget()
        lay = QHBoxLayout(w)
        lay.setContentsMargins(0, 0, 0, 0)
        for x in widgets:
            lay.addWidget(x)
        return w

    def _append_log(self, text: str) -> None:
        self.log_edit.append(text)
        self.log_edit.moveCursor(QTextCursor.MoveOperation.End)

    def _install_logging_bridge(self) -> None:
        self._log_emitter = QtLogEmitter()
        self._log_emitter.message.connect(self._append_log)
        handler = QtTailHandler(self._log_emitter.message.emit)
        logging.getLogger(LOGGER_NAME).addHandler(handler)

    # ---------------------- state -> widgets ----------------------
    def _sync_controls(self) -> None:
        spec = self.session.spec
        widgets = (self.width_spin, self.height_spin, self.format_combo, self.fit_combo, self.bg_combo)
        for w in widgets:
            w.blockSignals(True)
        try:
            self.width_spin.setValue(int(spec.width or MIN_DIMENSION))
            self.height_spin.setValue(int(spec.height or MIN_DIMENSION))
            self.format_combo.setCurrentIndex(self.format_combo.findData(spec.format))
            self.fit_combo.setCurrentIndex(self.fit_combo.findData(spec.fit_mode))
            self.bg_combo.setCurrentIndex(self.bg_combo.findData(spec.background_mode))
        finally:
            for w in widgets:
                w.blockSignals(False)
        self.color_btn.setText(spec.background_color)
        self.color_btn.setStyleSheet(f"background-color: {spec.background_color};")
        self.eyedropper_btn.blockSignals(True)
        self.eyedropper_btn.setChecked(self.session.picking_color)
        self.eyedropper_btn.blockSignals(False)
        self.eyedropper_btn.setEnabled(self.session.image_loaded)
        self.export_btn.setEnabled(self.session.image_loaded)

    def _on_rendered(self, surface: RasterSurface) -> None:
        self.canvas.show_surface(surface)
        self._sync_controls()

    def _refresh_presets(self) -> None:
        self.preset_list.clear()
        for p in self.session.presets:
            item = QListWidgetItem(f"{p.name}  ({p.width}×{p.height} {p.format.label})")
            item.setData(Qt.ItemDataRole.UserRole, p)
            self.preset_list.addItem(item)

    def _selected_preset(self):
        item = self.preset_list.currentItem()
        return item.data(Qt.ItemDataRole.UserRole) if item else None

    # ---------------------- loading ----------------------
    def _browse_input(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Select Image", "", IMAGE_FILTER)
        if path:
            self._load_path(path)

    def _load_path(self, path: str) -> None:
        token = self.session.begin_load()
        worker = DecodeWorker(token, path, self)
        worker.decoded.connect(self._on_decoded)
        self._start_worker(worker)
        self.statusBar().showMessage(f"Loading {Path(path).name}…")

    def _on_decoded(self, token: int, source) -> None:
        if self.session.finish_load(token, source):
            self.source_label.setText(
                f"{source.name}\n{source.natural_width}×{source.natural_height} px"
            )
            self.statusBar().showMessage("Image loaded")
        elif source is None:
            self.statusBar().showMessage("Could not read that file as an image")

    # ---------------------- color ----------------------
    def _choose_color(self) -> None:
        color = QColorDialog.getColor(QColor(self.session.spec.background_color), self, "Background Color")
        if color.isValid():
            self.session.update(background_color=color.name(), background_mode=BackgroundMode.COLOR)
            self._sync_controls()

    def _toggle_eyedropper(self, checked: bool) -> None:
        if checked:
            if not self.session.start_eyedropper():
                self.eyedropper_btn.setChecked(False)
                return
            self.canvas.setCursor(Qt.CursorShape.CrossCursor)
        else:
            self.session.cancel_eyedropper()
            self.canvas.unsetCursor()

    def _on_canvas_click(self, x: float, y: float) -> None:
        if not self.session.picking_color:
            return
        color = self.session.pick_color(x, y, (self.canvas.width(), self.canvas.height()))
        self.canvas.unsetCursor()
        if color:
            self.statusBar().showMessage(f"Background color {color}")

    # ---------------------- presets ----------------------
    def _save_preset(self) -> None:
        name = self.preset_name_edit.text()
        if not name.strip():
            return
        self.session.save_preset(name)
        self.preset_name_edit.clear()
        self._refresh_presets()

    def _apply_selected_preset(self) -> None:
        self.session.apply_preset(self._selected_preset())

    def _delete_selected_preset(self) -> None:
        preset = self._selected_preset()
        if preset is None:
            return
        self.session.delete_preset(preset)
        self._refresh_presets()

    # ---------------------- export ----------------------
    def _export(self) -> None:
        prepared = self.session.prepare_export()
        if prepared is None:
            return
        surface, filename = prepared
        directory = QFileDialog.getExistingDirectory(self, "Export To Folder")
        if not directory:
            return
        worker = EncodeWorker(surface, self.session.spec.format, filename, directory, self)
        worker.finished_export.connect(self._on_exported)
        worker.error.connect(self._on_export_error)
        self.export_btn.setEnabled(False)
        self._start_worker(worker)

    def _on_exported(self, path: str) -> None:
        self.export_btn.setEnabled(self.session.image_loaded)
        if path:
            self.statusBar().showMessage(f"Saved {path}")

    def _on_export_error(self, message: str) -> None:
        self.export_btn.setEnabled(self.session.image_loaded)
        QMessageBox.warning(self, "Export Failed", f"Could not write the file:\n{message}")

    # ---------------------- workers ----------------------
    def _start_worker(self, worker: QThread) -> None:
        self._workers.append(worker)
        worker.finished.connect(lambda w=worker: self._workers.remove(w))
        worker.start()

    def showEvent(self, event):
        # the real device pixel ratio is only known once the window is on a screen
        super().showEvent(event)
        self.session.set_pixel_density(self.devicePixelRatioF())

    def closeEvent(self, event):
        for w in list(self._workers):
            w.wait()
        super().closeEvent(event)

