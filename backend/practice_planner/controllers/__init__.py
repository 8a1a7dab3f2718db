# Controllers package: Flask blueprints for the JSON boundary

from .attendance_controller import attendance_bp
from .health_controller import health_bp
from .practices_controller import practices_bp
from .resources_controller import resources_bp
from .sets_controller import sets_bp

__all__ = ["attendance_bp", "health_bp", "practices_bp", "resources_bp", "sets_bp"]
