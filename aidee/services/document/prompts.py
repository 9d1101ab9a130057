"""
Image prompts derived from a product idea and its brief.
"""
from typing import Any


def _get(brief: dict[str, Any] | None, section: str, key: str) -> Any:
    value = (brief or {}).get(section)
    if not isinstance(value, dict):
        return None
    return value.get(key)


def _str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _join(items: Any, attr: str | None = None, sep: str = ", ") -> str:
    if not isinstance(items, list):
        return ""
    parts = []
    for item in items:
        if attr is not None:
            item = item.get(attr) if isinstance(item, dict) else None
        if isinstance(item, str) and item.strip():
            parts.append(item.strip())
    return sep.join(parts)


def build_design_prompts(idea: str, brief: dict[str, Any] | None = None) -> dict[str, str]:
    """Return {"prompt_main", "prompt_lifestyle"}; every brief field is optional."""
    idea = idea.strip()
    brief = brief if isinstance(brief, dict) else None
    title = (
        _str(_get(brief, "visual_rfp", "project_title"))
        or _str(_get(brief, "target_and_problem", "summary"))
        or idea
    )
    target_users = _str(_get(brief, "visual_rfp", "target_users")) or "everyday users"
    features = (brief or {}).get("key_features")
    if not isinstance(features, list):
        features = []
    key_features = _join(features, "name") or "practical, durable, easy to use"
    feature_details = "; ".join(
        f"{_str(f['name'])}: {_str(f['description'])}"
        for f in features
        if isinstance(f, dict) and _str(f.get("name")) and _str(f.get("description"))
    )
    requirements = _join(_get(brief, "visual_rfp", "core_requirements"))
    diff_points = _join((brief or {}).get("differentiation"), "point")
    direction = _str(_get(brief, "visual_rfp", "design_direction")) or "modern, minimal, high-end product feeling"
    context = _str(_get(brief, "target_and_problem", "details"))

    main_lines = [
        f'Industrial design concept render of a product called "{title}".',
        f"For target users: {target_users}.",
        f"Key features: {key_features}.",
        f"Detailed features: {feature_details or 'integrated functions that solve the core user need'}.",
        f"Core requirements: {requirements or 'reliable, comfortable, easy to carry and maintain'}.",
        f"Differentiation: {diff_points or 'clearly better suited to its users than generic alternatives'}.",
        f"Design direction: {direction}.",
    ]
    if context:
        main_lines.append(f"Usage context: {context}.")
    main_lines += [
        "Single product on a neutral studio background, 3D product render, no people, "
        "no text, no logo, high detail, soft studio lighting.",
        f"(Original idea: {idea})",
    ]

    lifestyle_lines = [
        f'Lifestyle render of people using "{title}" in its typical environment.',
        f"Product design follows: {key_features}" + (f", {requirements}." if requirements else "."),
        "Scene: natural everyday use, warm light, focus on the product design and how it is used.",
        "Photorealistic lighting, cinematic, high detail, minimal distraction from the product.",
    ]
    return {
        "prompt_main": "\n".join(main_lines),
        "prompt_lifestyle": "\n".join(lifestyle_lines),
    }
