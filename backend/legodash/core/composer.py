"""Per-stand color composition."""
import itertools
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.level import BrickColor, Difficulty, Stand
from .random_source import RandomSource
from .validator import EASY_DOMINANT_SHARE, composition_error, required_color_count

logger = logging.getLogger(__name__)

ColorCounts = Dict[BrickColor, int]


class StandColorComposer:
    """Synthesizes the brick colors of each stand for a difficulty."""

    # Easy stands occasionally carry a third color
    EASY_THIRD_COLOR_CHANCE = 0.2
    # Stands solved exactly so every color total is a whole number of tasks
    SOLVED_STAND_COUNT = 3
    # Head class combinations tried per draw before giving up on it
    MAX_RESIDUE_TRIES = 20000
    # Largest residue walk (reachable states x classes per stand) worth doing up front
    FEASIBILITY_CHECK_LIMIT = 200000

    def __init__(self):
        self._candidate_cache: Dict[Tuple, List[Tuple[int, ...]]] = {}
        self._residue_cache: Dict[Tuple, Dict[Tuple[int, ...], List[Tuple[int, ...]]]] = {}
        self._feasible_cache: Dict[Tuple, Optional[bool]] = {}

    def color_counts(
        self,
        difficulty: Difficulty,
        size: int,
        pool: Sequence[BrickColor],
        rng: RandomSource,
    ) -> ColorCounts:
        """
        Draw per-color brick counts for one stand.

        Easy: two colors (sometimes three) with a dominant color of at least
        60%. Medium: exactly three balanced colors. Hard: four balanced colors.
        Uneven remainders go round-robin from the first chosen color.

        Args:
            difficulty: Difficulty tier.
            size: Bricks in the stand.
            pool: Colors available to the level.
            rng: Random source.

        Returns:
            Color -> count, in draw order.
        """
        if size <= 0 or not pool:
            return {}

        if difficulty == Difficulty.EASY:
            return self._easy_counts(size, pool, rng)

        distinct = required_color_count(difficulty, size, len(pool))
        colors = rng.shuffled(pool)[:distinct]
        return self._balanced(colors, size)

    def _easy_counts(
        self, size: int, pool: Sequence[BrickColor], rng: RandomSource
    ) -> ColorCounts:
        if size < 3 or len(pool) == 1:
            return {rng.choice(pool): size}

        distinct = 2
        if len(pool) >= 3 and size >= 5 and rng.chance(self.EASY_THIRD_COLOR_CHANCE):
            distinct = 3

        colors = rng.shuffled(pool)[:distinct]
        dominant_min = _dominant_minimum(size)
        dominant = rng.next_int(dominant_min, size - (distinct - 1) + 1)

        counts = {colors[0]: dominant}
        counts.update(self._balanced(colors[1:], size - dominant))
        return counts

    @staticmethod
    def _balanced(colors: Sequence[BrickColor], size: int) -> ColorCounts:
        base, remainder = divmod(size, len(colors))
        return {
            color: base + (1 if i < remainder else 0)
            for i, color in enumerate(colors)
        }

    def expand(self, counts: ColorCounts, rng: RandomSource) -> Stand:
        """Lay out counts as a shuffled brick sequence (bottom to top)."""
        bricks: Stand = []
        for color, count in counts.items():
            bricks.extend([color] * count)
        return rng.shuffle(bricks)

    def compose(
        self,
        difficulty: Difficulty,
        size: int,
        pool: Sequence[BrickColor],
        rng: RandomSource,
    ) -> Stand:
        """Draw and lay out a single stand."""
        return self.expand(self.color_counts(difficulty, size, pool, rng), rng)

    def candidate_counts(
        self,
        difficulty: Difficulty,
        size: int,
        pool: Sequence[BrickColor],
        max_colors: Optional[int] = None,
    ) -> List[Tuple[int, ...]]:
        """
        Enumerate every valid count vector for a stand.

        Vectors are aligned with ``pool``; each one passes the same
        composition check the validator applies.
        """
        key = (difficulty, size, tuple(pool), max_colors)
        cached = self._candidate_cache.get(key)
        if cached is not None:
            return cached

        k = len(pool)
        found = set()
        low = required_color_count(difficulty, size, k)
        high = min(3, size, k) if difficulty == Difficulty.EASY else low
        if max_colors is not None:
            high = min(high, max(low, max_colors))

        for distinct in range(low, high + 1):
            for chosen in itertools.combinations(range(k), distinct):
                for split in _splits(difficulty, size, distinct):
                    vector = [0] * k
                    for index, count in zip(chosen, split):
                        vector[index] = count
                    found.add(tuple(vector))

        candidates = sorted(
            v for v in found
            if composition_error(difficulty, dict(zip(pool, v)), k) is None
        )
        self._candidate_cache[key] = candidates
        return candidates

    def residue_classes(
        self,
        difficulty: Difficulty,
        size: int,
        pool: Sequence[BrickColor],
        chunk_size: int,
        max_colors: Optional[int] = None,
    ) -> Dict[Tuple[int, ...], List[Tuple[int, ...]]]:
        """Candidate vectors grouped by their per-color residue mod ``chunk_size``."""
        key = (difficulty, size, tuple(pool), max_colors, chunk_size)
        classes = self._residue_cache.get(key)
        if classes is None:
            classes = {}
            for vector in self.candidate_counts(difficulty, size, pool, max_colors):
                classes.setdefault(_residue(vector, chunk_size), []).append(vector)
            self._residue_cache[key] = classes
        return classes

    def layout_feasible(
        self,
        difficulty: Difficulty,
        sizes: Sequence[int],
        pool: Sequence[BrickColor],
        chunk_size: int,
    ) -> Optional[bool]:
        """
        Decide whether any composition of ``sizes`` gives whole-task color totals.

        Walks the set of reachable residue vectors stand by stand. Stops early
        once every residue with the right coordinate sum is reachable, since
        adding further stands only translates that set onto itself.

        Returns:
            True or False, or None when the residue space is too large to walk.
        """
        pool = list(pool)
        if sum(sizes) % chunk_size:
            return False
        key = (difficulty, tuple(sorted(sizes)), len(pool), chunk_size)
        if key in self._feasible_cache:
            return self._feasible_cache[key]

        space = chunk_size ** max(0, len(pool) - 1)
        groups = [self.residue_classes(difficulty, size, pool, chunk_size) for size in sorted(sizes)]
        if space * max((len(g) for g in groups), default=0) > self.FEASIBILITY_CHECK_LIMIT:
            return None

        reachable = {tuple([0] * len(pool))}
        feasible: Optional[bool] = None
        for classes in groups:
            if not classes:
                feasible = False
                break
            reachable = {
                tuple((a + b) % chunk_size for a, b in zip(r, c))
                for r in reachable
                for c in classes
            }
            if len(reachable) == space:
                feasible = True
                break
        if feasible is None:
            feasible = tuple([0] * len(pool)) in reachable

        self._feasible_cache[key] = feasible
        return feasible

    def compose_layout(
        self,
        difficulty: Difficulty,
        sizes: Sequence[int],
        pool: Sequence[BrickColor],
        rng: RandomSource,
        chunk_size: int,
    ) -> Optional[List[Stand]]:
        """
        Compose every stand so each color total is a multiple of ``chunk_size``.

        All stands but the last few are drawn freely; the remaining ones are
        solved against the color residues, one residue class per stand, and a
        concrete vector is then drawn from each chosen class.

        Returns:
            Stands (bottom to top), or None when this draw cannot be completed.
        """
        pool = list(pool)
        solved = min(self.SOLVED_STAND_COUNT, len(sizes))
        free_sizes = sizes[: len(sizes) - solved]
        solved_sizes = sizes[len(sizes) - solved:]

        drawn = [self.color_counts(difficulty, size, pool, rng) for size in free_sizes]

        residue = [0] * len(pool)
        for counts in drawn:
            for i, color in enumerate(pool):
                residue[i] = (residue[i] + counts.get(color, 0)) % chunk_size
        target = tuple((-r) % chunk_size for r in residue)

        limits: List[Optional[int]] = [None]
        if difficulty == Difficulty.EASY:
            # Keep three-color stands rare in the solved tail too
            limits = [2, None]

        vectors = None
        for limit in limits:
            groups = [
                self.residue_classes(difficulty, size, pool, chunk_size, limit)
                for size in solved_sizes
            ]
            vectors = _solve_residues(groups, target, chunk_size, rng, self.MAX_RESIDUE_TRIES)
            if vectors is not None:
                break

        if vectors is None:
            logger.debug("No residue completion for sizes %s", list(sizes))
            return None

        for vector in vectors:
            drawn.append({color: count for color, count in zip(pool, vector) if count > 0})

        return [self.expand(counts, rng) for counts in drawn]


def _dominant_minimum(size: int) -> int:
    """Smallest count that is at least the easy dominant share of ``size``."""
    minimum = int(EASY_DOMINANT_SHARE * size)
    while minimum < EASY_DOMINANT_SHARE * size:
        minimum += 1
    return max(1, minimum)


def _splits(difficulty: Difficulty, size: int, distinct: int):
    """Count splits of ``size`` over ``distinct`` colors worth checking."""
    if distinct == 1:
        yield (size,)
        return

    if difficulty != Difficulty.EASY:
        base, remainder = divmod(size, distinct)
        for extra in itertools.combinations(range(distinct), remainder):
            yield tuple(base + (1 if i in extra else 0) for i in range(distinct))
        return

    for dominant_pos in range(distinct):
        for dominant in range(_dominant_minimum(size), size - (distinct - 1) + 1):
            for rest in _positive_splits(size - dominant, distinct - 1):
                split = list(rest)
                split.insert(dominant_pos, dominant)
                yield tuple(split)


def _positive_splits(total: int, parts: int):
    if parts == 1:
        if total >= 1:
            yield (total,)
        return
    for first in range(1, total - parts + 2):
        for rest in _positive_splits(total - first, parts - 1):
            yield (first,) + rest


def _residue(vector: Sequence[int], chunk_size: int) -> Tuple[int, ...]:
    return tuple(v % chunk_size for v in vector)


def _solve_residues(
    groups: List[Dict[Tuple[int, ...], List[Tuple[int, ...]]]],
    target: Tuple[int, ...],
    chunk_size: int,
    rng: RandomSource,
    max_tries: int,
) -> Optional[List[Tuple[int, ...]]]:
    """
    Pick one vector per stand whose residues sum to ``target`` mod chunk.

    Residue classes of every stand but the last are tried in random order;
    the last stand's class is then fixed by the target and looked up.
    Gives up after ``max_tries`` head combinations.
    """
    if not groups:
        return [] if all(t == 0 for t in target) else None
    if any(not classes for classes in groups):
        return None

    last = groups[-1]
    heads = [rng.shuffled(list(classes)) for classes in groups[:-1]]
    for tries, head in enumerate(itertools.product(*heads)):
        if tries >= max_tries:
            break
        used = [sum(column) for column in zip(*head)] if head else [0] * len(target)
        need = tuple((t - u) % chunk_size for t, u in zip(target, used))
        matches = last.get(need)
        if matches:
            chosen = [rng.choice(classes[r]) for classes, r in zip(groups, head)]
            return chosen + [rng.choice(matches)]
    return None
