from .profile import generate_profile_name, profile_draft

__all__ = ["profile_draft", "generate_profile_name"]
