from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, MutableMapping

import yaml

from .textutils import normalize_keyword

logger = logging.getLogger(__name__)

# Groups whose clusters match keyword stems (``\bkeyword\w*\b``) instead of whole words.
STEM_GROUPS = frozenset({"fiction", "genre", "conflict", "sense", "resolution"})

THEME_CLUSTERS: Dict[str, List[str]] = {
    "Love & Connection": [
        "love", "loved", "loving", "heart", "passion", "romance", "affection",
        "devotion", "desire", "longing", "connection", "bond", "relationship",
        "intimacy", "attachment", "warmth", "tenderness", "caring", "cherish",
    ],
    "Identity & Self": [
        "identity", "self", "who", "am", "become", "belong", "find", "discover",
        "myself", "yourself", "himself", "herself", "purpose", "meaning", "exist",
        "authentic", "true", "real", "mask", "pretend", "facade", "persona",
    ],
    "Power & Control": [
        "power", "control", "authority", "command", "rule", "dominate", "submit",
        "obey", "resist", "rebel", "force", "strength", "weak", "helpless",
        "manipulate", "influence", "dominance", "subordinate", "master", "servant",
    ],
    "Justice & Morality": [
        "justice", "injustice", "right", "wrong", "moral", "immoral", "ethical",
        "fair", "unfair", "deserve", "punish", "reward", "guilt", "innocent", "sin",
        "virtue", "evil", "good", "conscience", "principle", "honor",
    ],
    "Freedom & Captivity": [
        "freedom", "free", "liberty", "escape", "trap", "trapped", "prison", "cage",
        "bound", "chains", "release", "liberate", "captive", "confined",
        "restricted", "limit", "break free", "independence", "autonomy",
        "constrained",
    ],
    "Loss & Grief": [
        "loss", "lose", "lost", "grief", "mourn", "mourning", "death", "dead",
        "die", "dying", "gone", "absence", "missing", "empty", "void", "sorrow",
        "ache", "pain", "hurt", "regret", "farewell", "goodbye", "end",
    ],
    "Hope & Despair": [
        "hope", "hopeful", "hopeless", "despair", "desperate", "optimism",
        "pessimism", "dream", "nightmare", "wish", "fear", "dread", "dark", "light",
        "future", "fate", "destiny", "promise", "impossible", "possible",
    ],
    "Truth & Deception": [
        "truth", "true", "lie", "lied", "lies", "lying", "deceive", "deceit",
        "deception", "honest", "dishonest", "fake", "false", "real", "illusion",
        "secret", "hide", "hidden", "reveal", "conceal", "expose", "betrayal",
    ],
    "Survival & Struggle": [
        "survive", "survival", "struggle", "fight", "battle", "endure", "persevere",
        "overcome", "challenge", "threat", "danger", "risk", "peril", "adversity",
        "hardship", "suffer", "sacrifice", "conquer", "victory", "defeat",
    ],
    "Change & Transformation": [
        "change", "changed", "changing", "transform", "transformation", "evolve",
        "evolution", "growth", "develop", "different", "new", "old", "before",
        "after", "become", "was", "now", "then", "shift", "transition",
    ],
    "Isolation & Belonging": [
        "alone", "lonely", "solitude", "isolation", "isolated", "together",
        "belong", "belonging", "outsider", "stranger", "community", "family",
        "home", "exile", "outcast", "separate", "apart", "connect", "disconnect",
    ],
    "Memory & Forgetting": [
        "remember", "remembering", "memory", "memories", "forget", "forgotten",
        "forgetting", "recall", "reminisce", "past", "nostalgia", "history",
        "remind", "recollection", "flashback", "haunt", "linger", "erase",
    ],
}

SYMBOLIC_OBJECTS: Dict[str, List[str]] = {
    "Light/Dark": [
        "light", "lights", "darkness", "shadow", "shadows", "sun", "moon", "stars",
        "dawn", "dusk", "twilight",
    ],
    "Water": [
        "water", "ocean", "sea", "river", "rain", "storm", "wave", "waves", "flood",
        "drown", "drowning",
    ],
    "Fire": [
        "fire", "flame", "flames", "burn", "burning", "ash", "ashes", "smoke",
        "ember", "blaze",
    ],
    "Nature": [
        "tree", "trees", "flower", "flowers", "garden", "forest", "woods",
        "mountain", "valley", "leaf", "leaves",
    ],
    "Birds": [
        "bird", "birds", "wing", "wings", "fly", "flying", "feather", "feathers",
        "nest", "flight",
    ],
    "Barriers": [
        "wall", "walls", "door", "doors", "window", "windows", "gate", "gates",
        "fence", "barrier", "threshold",
    ],
    "Paths": [
        "road", "path", "journey", "crossroads", "bridge", "bridges", "way",
        "direction", "destination",
    ],
    "Mirrors": [
        "mirror", "mirrors", "reflection", "reflections", "reflect", "glass", "image",
    ],
    "Blood": ["blood", "bleeding", "bleed", "wound", "wounds", "scar", "scars", "cut"],
    "Time": [
        "clock", "clocks", "time", "hour", "hours", "minute", "minutes", "second",
        "seconds", "watch", "watches",
    ],
}

FICTION_CLUSTERS: Dict[str, List[str]] = {
    "characters.indicators": [
        "protagonist", "antagonist", "character", "hero", "villain", "friend",
        "ally", "enemy", "she", "he", "they", "her", "his", "their", "him", "them",
    ],
    "characters.arc": [
        "changed", "realized", "learned", "grew", "became", "transformed",
        "discovered",
    ],
    "characters.actions": [
        "walked", "ran", "grabbed", "looked", "turned", "spoke", "whispered",
        "shouted", "smiled", "frowned",
    ],
    "setting.locations": [
        "room", "house", "street", "city", "town", "village", "forest", "mountain",
        "ocean", "building", "office", "home", "place", "space", "world", "land",
        "kingdom", "planet",
    ],
    "setting.sensory": [
        "smell", "scent", "odor", "aroma", "sound", "noise", "quiet", "loud", "soft",
        "warm", "cold", "hot", "cool", "bright", "dark", "light", "shadow", "rough",
        "smooth", "hard", "texture",
    ],
    "setting.weather": ["rain", "sun", "cloud", "wind", "storm", "snow", "fog", "mist"],
    "time.markers": [
        "morning", "afternoon", "evening", "night", "dawn", "dusk", "midnight",
        "noon", "yesterday", "today", "tomorrow", "now", "then", "later", "earlier",
        "before", "after", "minute", "hour", "day", "week", "month", "year",
        "century",
    ],
    "time.transitions": [
        "meanwhile", "later", "earlier", "suddenly", "eventually", "finally", "soon",
    ],
    "time.span": ["years", "months"],
    "plot.inciting": [
        "suddenly", "unexpected", "discovered", "arrived", "appeared", "broke",
        "changed",
    ],
    "plot.tension": [
        "but", "however", "although", "despite", "yet", "still", "nevertheless",
    ],
    "plot.climax": [
        "finally", "ultimate", "confronted", "faced", "battle", "showdown", "moment",
    ],
    "plot.resolution": [
        "resolved", "ended", "concluded", "finished", "peace", "finally", "at last",
    ],
    "plot.actions": [
        "grabbed", "ran", "jumped", "fought", "escaped", "chased", "attacked",
        "defended",
    ],
    "conflict.external": [
        "fight", "struggle", "conflict", "battle", "argue", "disagree", "oppose",
        "resist", "against", "versus", "enemy", "threat", "danger", "problem",
        "obstacle", "challenge",
    ],
    "conflict.emotional": [
        "torn", "conflicted", "confused", "uncertain", "doubt", "fear", "anger",
        "frustration",
    ],
    "conflict.tension": ["tension", "pressure", "stress", "strain", "anxiety"],
    "theme.words": [
        "love", "death", "truth", "justice", "freedom", "power", "identity", "hope",
        "loss", "redemption", "sacrifice", "betrayal", "loyalty", "honor", "change",
    ],
    "theme.symbolic": ["symbol", "represent", "metaphor", "meaning", "significance"],
    "voice.sophisticated": [
        "ephemeral", "ubiquitous", "ineffable", "serendipity", "melancholy",
        "luminous",
    ],
    "voice.imagery": ["like", "as if", "seemed", "appeared", "resembled"],
    "pacing.actions": [
        "ran", "jumped", "grabbed", "rushed", "burst", "exploded", "attacked",
    ],
    "pacing.descriptive": ["was", "were", "seemed", "appeared", "looked", "felt"],
    "worldbuilding.world": [
        "kingdom", "empire", "city", "world", "realm", "land", "nation", "planet",
        "culture", "society", "people", "custom", "tradition", "law", "rule",
        "magic", "technology", "system", "power", "energy", "force",
    ],
    "worldbuilding.history": [
        "ancient", "history", "legend", "myth", "past", "once", "ago", "before",
    ],
    "worldbuilding.culture": [
        "ritual", "ceremony", "belief", "religion", "god", "worship", "sacred",
    ],
    "emotion.words": [
        "love", "hate", "fear", "joy", "sadness", "anger", "hope", "despair",
        "happy", "sad", "afraid", "angry", "worried", "excited", "nervous",
        "relieved", "grief", "pain", "suffering", "comfort", "warmth", "tenderness",
    ],
    "emotion.empathy": ["felt", "understood", "realized", "knew", "sensed", "recognized"],
    "emotion.vulnerability": [
        "vulnerable", "weak", "exposed", "raw", "broken", "hurt", "wounded",
    ],
    "emotion.connection": [
        "together", "alone", "connected", "apart", "bond", "relationship",
    ],
    "emotion.thought": ["thought", "wondered", "considered", "realized", "remembered"],
}

# Fiction lists that were exact word alternations rather than stem counts.
FICTION_EXACT_CLUSTERS = frozenset({"setting.placement"})
FICTION_CLUSTERS["setting.placement"] = [
    "stood", "sat", "located", "nestled", "perched", "overlooked",
]

GENRE_MARKERS: Dict[str, List[str]] = {
    "Fantasy": ["magic", "spell", "dragon", "wizard", "sword", "kingdom", "quest"],
    "SciFi": ["space", "ship", "alien", "technology", "future", "robot", "planet"],
    "Romance": ["love", "heart", "kiss", "passion", "romance", "together"],
    "Thriller": ["danger", "threat", "chase", "escape", "suspect", "murder"],
    "Horror": ["fear", "terror", "scream", "blood", "dark", "monster", "nightmare"],
    "Mystery": ["clue", "detective", "investigate", "suspect", "mystery", "solve"],
}

CONFLICT_KEYWORDS: Dict[str, List[str]] = {
    "internal": [
        "doubt", "fear", "guilt", "shame", "anxiety", "struggle", "torn",
        "conflicted", "wrestled", "battled with himself", "battled with herself",
        "inner turmoil", "conscience",
    ],
    "external": [
        "obstacle", "barrier", "enemy", "threat", "danger", "battle", "war", "fight",
        "attack", "storm", "challenge", "opposition",
    ],
    "interpersonal": [
        "argued", "disagreed", "quarrel", "dispute", "tension", "clash",
        "confrontation", "rivalry", "jealousy", "betrayal", "conflict", "against",
    ],
}

RESOLUTION_KEYWORDS: Dict[str, List[str]] = {
    "resolution": ["resolved", "settled", "peace", "agreement"],
}

SENSORY_WORDS: Dict[str, List[str]] = {
    "sight": [
        "saw", "looked", "watched", "glanced", "stared", "glimpsed", "observed",
        "noticed", "visible", "bright", "dark", "color", "shadow", "light", "glow",
        "shimmer", "sparkle", "gleam", "glitter", "shine",
    ],
    "sound": [
        "heard", "listened", "sound", "noise", "whisper", "shout", "scream", "cry",
        "voice", "echo", "bang", "crash", "thud", "click", "hum", "buzz", "ring",
        "roar", "silence", "quiet",
    ],
    "touch": [
        "touched", "felt", "grabbed", "held", "rough", "smooth", "soft", "hard",
        "cold", "hot", "warm", "cool", "texture", "pressure", "grip", "squeeze",
        "brush", "stroke", "tap", "pat",
    ],
    "smell": [
        "smelled", "scent", "odor", "aroma", "fragrance", "perfume", "stench",
        "stink", "whiff", "sniff", "musty", "fresh", "sweet", "pungent", "acrid",
        "smoky",
    ],
    "taste": [
        "tasted", "flavor", "sweet", "bitter", "sour", "salty", "savory", "spicy",
        "bland", "delicious", "tongue", "mouth", "palate", "ate", "drank",
    ],
}

SCENE_INDICATORS: Dict[str, List[str]] = {
    "scene": [
        "grabbed", "ran", "jumped", "fought", "attacked", "chased", "escaped",
        "confronted", "demanded", "shouted", "charged", "fired", "struck", "burst",
        "lunged", "rushed", "sprinted", "slammed",
    ],
}

SEQUEL_INDICATORS: Dict[str, List[str]] = {
    "sequel": [
        "thought", "wondered", "considered", "realized", "remembered", "reflected",
        "decided", "resolved", "understood", "contemplated", "pondered", "felt",
        "emotion", "reaction", "processing",
    ],
}

ACTION_VERBS: Dict[str, List[str]] = {
    "action verbs": [
        "ran", "jumped", "grabbed", "threw", "kicked", "punched", "dodged", "lunged",
        "rushed", "dashed", "sprinted", "fought", "attacked", "defended", "chased",
        "fled",
    ],
}

TENSE_MARKERS: Dict[str, List[str]] = {
    "past tense": ["was", "were", "had", "did", "went", "came", "saw"],
    "present tense": ["is", "are", "has", "does", "goes", "comes", "sees"],
}

PERSON_MARKERS: Dict[str, List[str]] = {
    "first person": ["i", "me", "my", "we", "us", "our"],
    "third person": ["he", "she", "they", "him", "her", "them"],
}

DUAL_CODING_PATTERNS: Dict[str, List[str]] = {
    "spatial": [
        "above", "below", "beneath", "adjacent", "parallel", "perpendicular",
        "horizontal", "vertical", "diagonal", "left", "right", "top", "bottom",
        "center", "middle", "side", "corner", "structure", "shape", "form",
        "arrangement", "configuration", "layout", "position", "connected",
        "attached", "linked", "joined", "bonded", "between",
    ],
    "process": [
        "first", "second", "third", "next", "then", "finally", "subsequently",
        "afterward", "step", "stage", "phase", "process", "procedure", "sequence",
        "cycle", "begins", "starts", "initiates", "leads to", "results in",
        "produces", "forms",
    ],
    "quantitative": [
        "increase", "decrease", "higher", "lower", "greater", "less", "more",
        "fewer", "compare", "comparison", "versus", "contrast", "difference",
        "similar", "data", "values", "measurements", "results", "statistics",
    ],
    "concept": [
        "concept", "theory", "principle", "law", "hypothesis", "model",
        "relationship", "interaction", "correlation", "connection", "defined as",
        "refers to", "means", "represents", "symbolizes", "consists of",
        "composed of", "made up of", "includes",
    ],
    "system": [
        "system", "component", "part", "element", "unit", "module", "contains",
        "comprises", "consists of", "includes", "function", "role", "purpose",
        "operates", "works",
    ],
}

DEFAULT_GROUPS: Dict[str, Dict[str, List[str]]] = {
    "theme": THEME_CLUSTERS,
    "symbol": SYMBOLIC_OBJECTS,
    "fiction": FICTION_CLUSTERS,
    "genre": GENRE_MARKERS,
    "conflict": CONFLICT_KEYWORDS,
    "resolution": RESOLUTION_KEYWORDS,
    "sense": SENSORY_WORDS,
    "scene": SCENE_INDICATORS,
    "sequel": SEQUEL_INDICATORS,
    "action": ACTION_VERBS,
    "tense": TENSE_MARKERS,
    "person": PERSON_MARKERS,
    "dual_coding": DUAL_CODING_PATTERNS,
}


@dataclass(frozen=True, slots=True)
class KeywordCluster:
    """A named, read-only set of keywords standing in for an abstract concept."""

    name: str
    group: str
    keywords: tuple[str, ...]
    stem: bool = False


class ClusterTable:
    """Immutable collection of keyword clusters, unique by name."""

    def __init__(self, clusters: Iterable[KeywordCluster]) -> None:
        by_name: dict[str, KeywordCluster] = {}
        by_group: dict[str, list[KeywordCluster]] = {}
        for cluster in clusters:
            if cluster.name in by_name:
                raise ValueError(f"Duplicate keyword cluster '{cluster.name}'.")
            by_name[cluster.name] = cluster
            by_group.setdefault(cluster.group, []).append(cluster)
        self._by_name = by_name
        self._by_group = {group: tuple(items) for group, items in by_group.items()}

    def __iter__(self) -> Iterator[KeywordCluster]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> KeywordCluster:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown keyword cluster '{name}'.") from None

    def group(self, group: str) -> tuple[KeywordCluster, ...]:
        return self._by_group.get(group, ())

    @property
    def groups(self) -> list[str]:
        return list(self._by_group)

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        return {
            group: {cluster.name: list(cluster.keywords) for cluster in clusters}
            for group, clusters in self._by_group.items()
        }

    def with_overrides(self, data: Mapping[str, Any]) -> "ClusterTable":
        """Return a new table with ``{group: {name: [keywords]}}`` overlaid."""
        clusters = dict(self._by_name)
        for group, entries in data.items():
            if not isinstance(entries, Mapping):
                raise ValueError(f"Cluster group '{group}' must map names to keyword lists.")
            for name, keywords in entries.items():
                existing = clusters.get(name)
                cleaned = _clean_keywords(keywords or [])
                if not cleaned:
                    if existing is None:
                        logger.warning(
                            "Skipping empty keyword cluster '%s' in group '%s'.", name, group
                        )
                    else:
                        logger.warning(
                            "Keyword cluster '%s' is empty; keeping the default keywords.",
                            name,
                        )
                    continue
                if existing is not None and existing.group != group:
                    raise ValueError(
                        f"Cluster '{name}' belongs to group '{existing.group}', not '{group}'."
                    )
                clusters[name] = KeywordCluster(
                    name=name,
                    group=group,
                    keywords=cleaned,
                    stem=existing.stem if existing else group in STEM_GROUPS,
                )
        return ClusterTable(clusters.values())


def _clean_keywords(keywords: Iterable[object]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for keyword in keywords:
        normalized = normalize_keyword(keyword)
        if normalized:
            seen.setdefault(normalized, None)
    return tuple(seen)


def _build_default_table() -> ClusterTable:
    clusters: list[KeywordCluster] = []
    for group, entries in DEFAULT_GROUPS.items():
        for name, keywords in entries.items():
            stem = group in STEM_GROUPS and name not in FICTION_EXACT_CLUSTERS
            clusters.append(
                KeywordCluster(
                    name=name, group=group, keywords=_clean_keywords(keywords), stem=stem
                )
            )
    return ClusterTable(clusters)


@lru_cache(maxsize=1)
def default_cluster_table() -> ClusterTable:
    """Build the built-in keyword table once per process."""
    return _build_default_table()


def cluster_table_from_dict(data: Mapping[str, Any] | None) -> ClusterTable:
    base = default_cluster_table()
    if not data:
        return base
    return base.with_overrides(data)


def load_cluster_table(path: str | Path | None = None) -> ClusterTable:
    """Load keyword overrides from YAML, falling back to the built-in table."""
    if path is None:
        return default_cluster_table()
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Keyword table YAML must define a mapping of groups.")
    return cluster_table_from_dict(parsed)
