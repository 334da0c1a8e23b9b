"""Level data models and structures."""
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Tuple
from enum import Enum


class BrickColor(str, Enum):
    """Available brick colors (declaration order is the palette order)."""
    BLUE = "Blue"
    RED = "Red"
    YELLOW = "Yellow"
    PURPLE = "Purple"
    GREEN = "Green"
    PINK = "Pink"
    ORANGE = "Orange"

    @classmethod
    def parse(cls, value: Any) -> "BrickColor":
        """Parse a color from its name, case-insensitively."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for color in cls:
                if color.value.lower() == value.strip().lower():
                    return color
        raise ValueError(f"Unknown brick color: {value!r}")


PALETTE: Tuple[BrickColor, ...] = tuple(BrickColor)

# A stand is a stack of bricks: index 0 is the bottom, the last index is the top.
Stand = List[BrickColor]


class Difficulty(str, Enum):
    """Difficulty tier enumeration."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyProfile:
    """Planning parameters derived from a difficulty tier."""
    window: int  # top-N bricks per stand considered reachable
    target_ratio: float  # reachable / required ratio a task color should reach
    priority_weight: float  # 0 = random color order, 1 = most exposed first

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty) -> "DifficultyProfile":
        """Get the profile for a difficulty."""
        return _PROFILES[Difficulty(difficulty)]


_PROFILES = {
    Difficulty.EASY: DifficultyProfile(window=3, target_ratio=1.5, priority_weight=0.9),
    Difficulty.MEDIUM: DifficultyProfile(window=5, target_ratio=1.2, priority_weight=0.6),
    Difficulty.HARD: DifficultyProfile(window=7, target_ratio=1.0, priority_weight=0.3),
}


@dataclass
class Task:
    """An ordered demand for bricks of one color."""
    color: BrickColor
    required_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"color": self.color.value, "required_count": self.required_count}


@dataclass
class GeneratorConfig:
    """Capacity constants for level generation."""
    min_stand_count: int = 6
    max_stand_count: int = 10
    min_bricks_per_stand: int = 7
    max_bricks_per_stand: int = 10
    task_chunk_size: int = 9
    max_attempts: int = 60
    require_full_drain: bool = True
    search_budget: int = 50000
    palette: Tuple[BrickColor, ...] = PALETTE

    def problems(self) -> List[str]:
        """List bound combinations that can never be satisfied."""
        problems = []
        if self.min_stand_count < 1:
            problems.append("min_stand_count must be at least 1")
        if self.max_stand_count < self.min_stand_count:
            problems.append(
                f"max_stand_count ({self.max_stand_count}) is below "
                f"min_stand_count ({self.min_stand_count})"
            )
        if self.min_bricks_per_stand < 1:
            problems.append("min_bricks_per_stand must be at least 1")
        if self.max_bricks_per_stand < self.min_bricks_per_stand:
            problems.append(
                f"max_bricks_per_stand ({self.max_bricks_per_stand}) is below "
                f"min_bricks_per_stand ({self.min_bricks_per_stand})"
            )
        if self.task_chunk_size < 1:
            problems.append("task_chunk_size must be at least 1")
        if self.max_attempts < 1:
            problems.append("max_attempts must be at least 1")
        if not self.palette:
            problems.append("palette must contain at least one color")
        return problems

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "min_stand_count": self.min_stand_count,
            "max_stand_count": self.max_stand_count,
            "min_bricks_per_stand": self.min_bricks_per_stand,
            "max_bricks_per_stand": self.max_bricks_per_stand,
            "task_chunk_size": self.task_chunk_size,
            "max_attempts": self.max_attempts,
            "require_full_drain": self.require_full_drain,
            "palette": [c.value for c in self.palette],
        }


@dataclass
class GenerationParams:
    """Parameters for level generation."""
    total_bricks: int
    difficulty: Difficulty = Difficulty.EASY
    seed: Optional[int] = None
    preferred_stand_count: Optional[int] = None
    pool_size: Optional[int] = None

    def __post_init__(self):
        """Coerce the difficulty given as a plain string."""
        self.difficulty = Difficulty(self.difficulty)


@dataclass
class SolvabilityReport:
    """Result of replaying a task queue against stands."""
    solvable: bool
    failed_task_index: Optional[int] = None
    failed_color: Optional[BrickColor] = None
    reachable_count: int = 0
    required_count: int = 0
    leftover_bricks: int = 0
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "solvable": self.solvable,
            "failed_task_index": self.failed_task_index,
            "failed_color": self.failed_color.value if self.failed_color else None,
            "reachable_count": self.reachable_count,
            "required_count": self.required_count,
            "leftover_bricks": self.leftover_bricks,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    """Result of a structural check."""
    success: bool
    stand_index: Optional[int] = None
    message: str = ""

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(success=True)

    @classmethod
    def fail(cls, message: str, stand_index: Optional[int] = None) -> "ValidationResult":
        return cls(success=False, stand_index=stand_index, message=message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "stand_index": self.stand_index,
            "message": self.message,
        }


@dataclass
class ValidationReport:
    """Structural and solvability checks for a complete level."""
    success: bool
    structural: List[ValidationResult] = field(default_factory=list)
    solvability: Optional[SolvabilityReport] = None
    message: str = ""

    @property
    def failures(self) -> List[ValidationResult]:
        return [r for r in self.structural if not r.success]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "message": self.message,
            "failures": [r.to_dict() for r in self.failures],
            "solvability": self.solvability.to_dict() if self.solvability else None,
        }


@dataclass
class GenerationResult:
    """Result of level generation."""
    stands: List[Stand]
    tasks: List[Task]
    colors: List[BrickColor]
    difficulty: Difficulty
    requested_total: int
    adjusted_total: int
    attempts: int = 1
    seed: Optional[int] = None
    generation_time_ms: int = 0
    solvability: Optional[SolvabilityReport] = None

    @property
    def was_adjusted(self) -> bool:
        return self.adjusted_total != self.requested_total

    @property
    def success(self) -> bool:
        return True

    def to_level_dict(
        self,
        level_name: str = "Level",
        storage_capacity: int = 7,
        time_limit_seconds: float = 0.0,
    ) -> Dict[str, Any]:
        """Export as a level definition (stands and task convoy)."""
        return {
            "level_name": level_name,
            "storage_capacity": max(1, storage_capacity),
            "time_limit_seconds": max(0.0, time_limit_seconds),
            "stands": [
                {"stand_id": f"Stand_{i + 1}", "bricks": [c.value for c in stand]}
                for i, stand in enumerate(self.stands)
            ],
            "tasks": [task.to_dict() for task in self.tasks],
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "stands": [[c.value for c in stand] for stand in self.stands],
            "tasks": [task.to_dict() for task in self.tasks],
            "colors": [c.value for c in self.colors],
            "difficulty": self.difficulty.value,
            "requested_total": self.requested_total,
            "adjusted_total": self.adjusted_total,
            "was_adjusted": self.was_adjusted,
            "attempts": self.attempts,
            "seed": self.seed,
            "generation_time_ms": self.generation_time_ms,
            "solvability": self.solvability.to_dict() if self.solvability else None,
        }


class FailureKind(str, Enum):
    """Generation failure classes."""
    INPUT_INVALID = "input_invalid"
    GENERATION_EXHAUSTED = "generation_exhausted"


@dataclass
class GenerationFailure:
    """Diagnostic returned when no valid level could be produced."""
    kind: FailureKind
    message: str
    attempts: int = 0
    failed_color: Optional[BrickColor] = None
    reachable_count: int = 0
    required_count: int = 0

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "attempts": self.attempts,
            "failed_color": self.failed_color.value if self.failed_color else None,
            "reachable_count": self.reachable_count,
            "required_count": self.required_count,
        }
