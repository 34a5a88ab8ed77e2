from .client import AniListClient, AniListMedia

__all__ = ["AniListClient", "AniListMedia"]
