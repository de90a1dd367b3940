from .iris_db import IrisDatabase

__all__ = ['IrisDatabase']
