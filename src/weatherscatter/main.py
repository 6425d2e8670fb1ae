"""
Application Initialization
==========================
Loads the dataset, constructs the window and starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Loads the (immutable) Dataset before anything is drawn.
2. Derives the chart size from the screen.
3. Instantiates the Main Window (View + Controller).
"""
import logging
import sys
from typing import Optional

import pyqtgraph as pg
from PySide6.QtWidgets import QApplication, QMessageBox

from weatherscatter import config
from weatherscatter.logging_config import setup_logging
from weatherscatter.model.errors import DataError, DomainError
from weatherscatter.model.layout import ChartDimensions
from weatherscatter.model.records import load_dataset
from weatherscatter.view.main_window import MainWindow, VISIBLE_APP_NAME

logger = logging.getLogger(__name__)

pg.setConfigOption("background", "w")
pg.setConfigOption("foreground", "k")
pg.setConfigOptions(antialias=True)


def main(data_path: Optional[str] = None) -> None:
    # 1. Setup Logging (Console + Optional File, see WEATHERSCATTER_LOG_*)
    setup_logging()

    # 2. Create the Qt Application
    app = QApplication(sys.argv)
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Square chart fitting the screen
    screen = app.primaryScreen()
    size = config.MIN_CHART_SIZE
    if screen is not None:
        geometry = screen.availableGeometry()
        size = min(geometry.width(), geometry.height()) * 0.9
    dims = ChartDimensions.square(size)

    # 4. Load the data and build the window; nothing is rendered from a broken dataset
    path = data_path or config.DEFAULT_DATA_PATH
    try:
        dataset = load_dataset(path)
        window = MainWindow(dataset, dims)
    except (DataError, DomainError, OSError) as e:
        logger.exception(f"Could not load dataset '{path}'")
        QMessageBox.critical(None, "Data error", f"Could not load dataset:\n{str(e)}")
        sys.exit(1)
    window.show()

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
