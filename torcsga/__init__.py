"""Island-model genetic algorithm for tuning TORCS car controllers."""

__version__ = "0.1.0"
__all__ = ["problems", "torcs", "individual", "stats", "genetic", "cli"]