from __future__ import annotations

from manuscript_engine.clusters import ClusterTable, default_cluster_table
from manuscript_engine.config import EngineConfig
from manuscript_engine.models import Document
from manuscript_engine.pipeline import build_context
from manuscript_engine.tokenization import build_document

SAMPLE_SENTENCE = (
    '"I love you," she whispered. He ran through the storm, fear gripping his heart.'
)

SAMPLE_STORY = """Chapter One

Mara stood at the edge of the old harbor and watched the rain sweep over the water.
She remembered the night her brother left, and the memory still felt like a wound.
"Come home," she had begged him. "Please, Tomas, come home."

Tomas never answered. Years later the letters stopped, and Mara wondered whether
he had found the freedom he wanted or only another kind of cage. She felt the
cold wind on her face and heard the gulls cry above the waves.

The next morning a stranger arrived with news. He grabbed her arm, shouted a
warning, and ran toward the burning warehouse. Mara chased him through the smoke,
her heart pounding, fear and hope tangled together in her chest.

Inside, the fire roared. She struggled against the heat, doubt clawing at her,
until she saw Tomas trapped behind a fallen beam. They argued, then fought the
flames together. At last the danger passed and a fragile peace settled over them.

Later she sat by the window and thought about forgiveness. She understood now that
love and loss were two sides of the same coin, and she realized she was finally free.
"""


def uniform_text(paragraphs: int = 100, words_per_paragraph: int = 100) -> str:
    """Blank-line separated paragraphs of a token that matches no keyword cluster."""
    paragraph = " ".join(["zzq"] * words_per_paragraph)
    return "\n\n".join([paragraph] * paragraphs)


def context_for(
    text: str,
    config: EngineConfig | None = None,
    table: ClusterTable | None = None,
    **extra,
):
    document: Document = build_document(text)
    return build_context(
        document, table or default_cluster_table(), config or EngineConfig(), **extra
    )
