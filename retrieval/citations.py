from html import escape

from vector_store.models import ChunkRecord


def format_result(chunk: ChunkRecord) -> str:
    """Render one chunk as a tagged citation for a chat prompt."""
    return (
        f'<result filename="{escape(chunk.document_id)}" '
        f'page_number="{chunk.page_number}">{escape(chunk.text, quote=False)}</result>'
    )


def format_results(chunks: list[ChunkRecord]) -> list[str]:
    return [format_result(chunk) for chunk in chunks]
