import math

# World
GRID_WIDTH: float = 700.0
GRID_HEIGHT: float = 700.0

# Boids
NUMBER_BOIDS: int = 500
BOID_MASS: float = 1.0
BOID_MAX_SPEED: float = 100.0
BOID_MAX_FORCE: float = 1000.0
BOID_INITIAL_SPEED: float = 50.0

# Perception
SEPARATION_RADIUS: float = 25.0
ALIGNMENT_RADIUS: float = 50.0
COHESION_RADIUS: float = 50.0
VIEW_ANGLE: float = 4.7  # radians, full cone

# Weights
SEPARATION_WEIGHT: float = 1.5
ALIGNMENT_WEIGHT: float = 1.0
COHESION_WEIGHT: float = 1.0

# Goal seeking
GOAL_ATTRACTION_WEIGHT: float = 1.0
GOAL_ARRIVAL_RADIUS: float = 100.0
GOAL_EPSILON: float = 0.001
GOAL_OUTSIDE_FORCE_MULTIPLIER: float = 2.0
GOAL_INSIDE_FORCE_MULTIPLIER: float = 1.0

# Soft boundary
BORDER_DISTANCE: float = 50.0
REPULSION_STRENGTH: float = 500.0

# Timing
PHYSICS_FPS: int = 60

# Parameter panel ranges (min, max)
PARAMETER_RANGES: dict[str, tuple[float, float]] = {
    "separation_radius": (0.0, 100.0),
    "alignment_radius": (0.0, 200.0),
    "cohesion_radius": (0.0, 200.0),
    "separation_weight": (0.0, 5.0),
    "alignment_weight": (0.0, 5.0),
    "cohesion_weight": (0.0, 5.0),
    "view_angle": (0.0, math.tau),
    "goal_attraction_weight": (0.0, 2.0),
    "goal_arrival_radius": (20.0, 300.0),
    "width": (200.0, 1000.0),
    "height": (200.0, 1000.0),
}
