"""Turning serialized construct trees into text.

Writing the files is left to the caller:

    for path, text in render_project(project).items():
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        Path(path).write_text(text)
"""

from typing import Dict, Mapping, Optional

from teamcity_dsl.project.project import Project
from teamcity_dsl.shared.config import SerializationConfig
from teamcity_dsl.shared.logging import get_logger
from teamcity_dsl.xmltree import XmlDocument


def render_documents(
    documents: Mapping[str, XmlDocument],
    config: Optional[SerializationConfig] = None,
) -> Dict[str, str]:
    """Render every document with ``config``'s render settings.

    Args:
        documents: Output path -> document, as returned by ``Project.to_xml``
        config: Serialization settings, defaults to :class:`SerializationConfig`

    Returns:
        Output path -> XML text, in the order of ``documents``
    """
    config = config or SerializationConfig()
    logger = get_logger(__name__, config.correlation_id, "output")

    rendered = {
        path: document.to_string(config=config.render)
        for path, document in documents.items()
    }
    logger.debug(
        "Documents rendered",
        extra={"document_count": len(rendered), "pretty": config.render.pretty},
    )
    return rendered


def render_project(project: Project) -> Dict[str, str]:
    """Serialize ``project`` and render it with the project's own config."""
    return render_documents(project.to_xml(), project.config)
