"""CareEase practice-management backend."""
