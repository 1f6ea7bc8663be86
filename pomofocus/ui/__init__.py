"""UI layer - PySide6 desktop host"""

from .tray_icon import SystemTrayApp

__all__ = ["SystemTrayApp"]
