"""
The MODEL layer contains pure data structures and numerical logic.
It has NO knowledge of the GUI (Qt) or the plotting backend (pyqtgraph).
It deals with Records, Scales, Density Estimation and Spatial Indexing.
"""
