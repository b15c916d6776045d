"""
End-to-end pipeline: raw snapshot → decoded form → weights → dependencies.

Each stage produces the input of the next. Dependency resolution is a
separate, optional stage (resolve=True by default here, but never implied
by the weight engine itself).
"""

import logging
from typing import Any, Optional

from surveyweights.classifiers import TextClassifier
from surveyweights.config import WeightTemplates, get_profile
from surveyweights.decoder import decode_form, extract_form_data
from surveyweights.dependencies import resolve_dependencies
from surveyweights.model import FormModel
from surveyweights.weights import assign_weights

logger = logging.getLogger(__name__)


def analyze_form(data: Any, fallback_title: str = "",
                 templates: Optional[WeightTemplates] = None,
                 classifier: Optional[TextClassifier] = None,
                 resolve: bool = True) -> FormModel:
    """
    Decode a raw snapshot and weight every question.

    Args:
        data: Raw nested snapshot
        fallback_title: Title used when the snapshot has none
        templates: Template profile (defaults to "classic")
        classifier: Keyword classifier (defaults to the built-in table)
        resolve: Run the cross-question dependency stage

    Returns:
        Weighted FormModel

    Raises:
        FormDecodeError: If the snapshot is malformed
    """
    templates = templates or get_profile()
    form = decode_form(data, fallback_title=fallback_title)
    logger.info("Decoded form %r: %d questions", form.title, len(form.questions))

    assign_weights(form.questions, templates, classifier)
    form.metadata["template_profile"] = templates.name
    if resolve:
        resolve_dependencies(form.questions, classifier)
        form.metadata["dependencies_resolved"] = "true"
    logger.info("Weighted form %r with %s templates", form.title, templates.name)
    return form


def analyze_page(html: str, fallback_title: str = "", **kwargs: Any) -> FormModel:
    """Extract the snapshot from a page's HTML and run analyze_form()."""
    return analyze_form(extract_form_data(html), fallback_title=fallback_title, **kwargs)
