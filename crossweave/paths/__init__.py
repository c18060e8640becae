from .splines import Spline, project_dot_fills, project_splines, selected_dots

__all__ = ["Spline", "project_splines", "project_dot_fills", "selected_dots"]
