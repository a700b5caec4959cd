# resizer/gui.py
# Entry point for the desktop application
# - application metadata
# - logger set up before any window exists
# - startup failures shown in a dialog instead of a silent exit

from __future__ import annotations

import sys
import traceback
from PySide6.QtWidgets import QApplication, QMessageBox

from resizer.config import APP_NAME
from resizer.utils.logging_utils import build_logger


def main() -> int:
    """
    Create the Qt application, show the main window and run the event loop.
    """
    app = QApplication(sys.argv)

    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(f"{APP_NAME} - Fit & Export")
    app.setApplicationVersion("1.0")
    app.setOrganizationName(APP_NAME)

    logger = build_logger()

    try:
        # deferred so import problems end up in the dialog below
        from resizer.ui_main_window import MainWindow

        window = MainWindow()
        window.show()
        return app.exec()

    except ImportError as e:
        error_text = (
            f"Failed to import required modules:\n\n"
            f"{str(e)}\n\n"
            f"Please ensure all dependencies are installed:\n"
            f"  pip install PySide6 Pillow"
        )
        logger.error(error_text)
        QMessageBox.critical(None, f"Import Error - {APP_NAME}", error_text)
        return 1

    except Exception as e:
        logger.error("Application startup failed: %s\n%s", e, traceback.format_exc())
        msg_box = QMessageBox()
        msg_box.setIcon(QMessageBox.Icon.Critical)
        msg_box.setWindowTitle(f"Startup Error - {APP_NAME}")
        msg_box.setText("Application failed to start:")
        msg_box.setInformativeText(str(e))
        msg_box.setDetailedText(traceback.format_exc())
        msg_box.setStandardButtons(QMessageBox.StandardButton.Ok)
        msg_box.exec()
        return 1


if __name__ == "__main__":
    sys.exit(main())
