# MIT License © 2025 Motohiro Suzuki
__version__ = "1.0.0"
