"""bevyrly - catalog and query Bevy ECS systems by the data they access."""

__version__ = "0.1.0"
