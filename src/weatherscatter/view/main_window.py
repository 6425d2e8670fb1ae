"""
Main Application Window
=======================
Hosts the chart canvas and wires its pointer signals to the
InteractionController.

Why is this file needed?
------------------------
1. Layout: It sizes the square chart to the available screen.
2. Routing: It connects the view's Qt signals to the controller handlers, so
   events are processed one at a time, in delivery order, on the GUI thread.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout

from weatherscatter.controller.chart import ScatterChart
from weatherscatter.controller.interaction import InteractionController
from weatherscatter.view.scatter_view import ScatterView

if TYPE_CHECKING:
    from weatherscatter.model.layout import ChartDimensions
    from weatherscatter.model.records import Dataset

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Daily Temperatures"


class MainWindow(QMainWindow):
    def __init__(self, dataset: Dataset, dims: ChartDimensions, title: str = VISIBLE_APP_NAME) -> None:
        super().__init__()
        self.setWindowTitle(title)

        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)

        self.chart = ScatterChart.build(dataset, dims)

        self.scatter_view = ScatterView(dims)
        main_layout.addWidget(self.scatter_view)

        self.controller = InteractionController(self.chart, self.scatter_view)

        # --- SIGNAL CONNECTIONS ---
        self.scatter_view.cell_entered.connect(self.controller.on_cell_enter)
        self.scatter_view.cell_left.connect(self.controller.on_cell_leave)
        self.scatter_view.legend_moved.connect(self.controller.on_legend_move)
        self.scatter_view.legend_left.connect(self.controller.on_legend_leave)

        # Initial Render
        self.chart.render(self.scatter_view)
        self.resize(int(dims.width), int(dims.height))
