"""
Prompt composition for angle synthesis and scene composites.
"""

from app.prompts.composer import compose_angle_requests, compose_scene_request

__all__ = ["compose_angle_requests", "compose_scene_request"]
