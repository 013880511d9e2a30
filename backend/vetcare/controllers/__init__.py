"""HTTP blueprints exposing the clinic services as a JSON API."""

from .appointment_controller import appointment_bp
from .clinical_controller import clinical_bp
from .health_controller import health_bp
from .purchase_controller import purchase_bp

__all__ = ["appointment_bp", "clinical_bp", "health_bp", "purchase_bp"]
