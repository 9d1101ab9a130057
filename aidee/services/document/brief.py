"""
Design/business brief ("visual RFP") schema and the pre-authored fallback brief.
"""
from aidee.services.document.schema import FieldSpec, FieldType, SchemaDescriptor


def _text(name: str, default: str, description: str = "") -> FieldSpec:
    return FieldSpec(name, FieldType.STRING, default=default, description=description)


def _texts(name: str, default: list[str], description: str = "") -> FieldSpec:
    return FieldSpec(name, FieldType.STRING_ARRAY, default=default, non_empty=True, description=description)


def _phase(name: str, goal: str, task: str, owner: str, deliverable: str) -> FieldSpec:
    return FieldSpec(
        name,
        FieldType.OBJECT,
        fields=(
            _texts("goals", [goal], "what this phase must establish"),
            FieldSpec(
                "tasks",
                FieldType.OBJECT_ARRAY,
                default=[{"title": task, "owner": owner}],
                non_empty=True,
                fields=(
                    _text("title", task, "representative activity"),
                    _text("owner", owner, "PM / designer / engineer / marketer"),
                ),
            ),
            _texts("deliverables", [deliverable], "typical output of this phase"),
        ),
    )


def _review(name: str, risk: str, ask: str, check: str) -> FieldSpec:
    return FieldSpec(
        name,
        FieldType.OBJECT,
        fields=(
            _texts("risks", [risk], f"risks from the {name} point of view"),
            _texts("asks", [ask], "actions to take right now"),
            _texts("checklist", [check], "checklist items"),
        ),
    )


BRIEF_SCHEMA = SchemaDescriptor(
    name="brief",
    fields=(
        FieldSpec(
            "target_and_problem",
            FieldType.OBJECT,
            fields=(
                _text("summary", "Target users and the problem they face", "one-line summary"),
                _text(
                    "details",
                    "Why this product is needed, explained so that a non-expert can follow.",
                    "storytelling explanation of the need",
                ),
            ),
        ),
        FieldSpec(
            "key_features",
            FieldType.OBJECT_ARRAY,
            default=[{"name": "Core function", "description": "The main job the product does for its user."}],
            non_empty=True,
            fields=(
                _text("name", "Core function", "feature name"),
                _text("description", "The main job the product does for its user.", "plain-language description"),
            ),
        ),
        FieldSpec(
            "differentiation",
            FieldType.OBJECT_ARRAY,
            default=[{"point": "Focused use case", "strategy": "Position against general-purpose alternatives."}],
            non_empty=True,
            fields=(
                _text("point", "Focused use case", "differentiating point"),
                _text("strategy", "Position against general-purpose alternatives.", "how to make it visible"),
            ),
        ),
        FieldSpec(
            "concept_and_references",
            FieldType.OBJECT,
            fields=(
                _text("concept_summary", "A focused product concept for its target users.", "concept in one paragraph"),
                _texts("reference_keywords", ["product design concept"], "3-7 image search keywords"),
            ),
        ),
        FieldSpec(
            "visual_rfp",
            FieldType.OBJECT,
            fields=(
                _text("project_title", "Product design project", "project title"),
                _text("background", "Background and problem statement.", "background"),
                _text("objective", "Design and business objective.", "objective"),
                _text("target_users", "Primary target users", "core target"),
                _texts("core_requirements", ["Meets the core user need reliably"], "3-7 core requirements"),
                _text("design_direction", "Modern, minimal, functional", "form, material, color, tone"),
                _texts("deliverables", ["Concept board", "3D renderings"], "required deliverables"),
            ),
        ),
        FieldSpec(
            "double_diamond",
            FieldType.OBJECT,
            fields=(
                _phase("discover", "Understand the problem context", "User interviews", "PM", "Insight notes"),
                _phase("define", "Define product requirements", "Requirements matrix", "PM", "PRD v1"),
                _phase("develop", "Design and build prototypes", "3D design and mockups", "Designer/Engineer", "3D files"),
                _phase("deliver", "Prepare production and launch", "Manufacturer RFQ", "PM", "Launch plan"),
                FieldSpec(
                    "overall_budget_time",
                    FieldType.OBJECT,
                    fields=(
                        _text("total_budget_krw", "To be estimated", "total budget range in KRW"),
                        _text("total_time_weeks", "To be estimated", "total duration range in weeks"),
                        FieldSpec(
                            "ratio",
                            FieldType.OBJECT,
                            fields=(
                                _text("discover", "20%", "share of budget/time"),
                                _text("define", "20%", "share of budget/time"),
                                _text("develop", "40%", "share of budget/time"),
                                _text("deliver", "20%", "share of budget/time"),
                            ),
                        ),
                        _text("notes", "Rough guide; refine after quotes.", "assumptions behind the estimate"),
                    ),
                ),
                FieldSpec(
                    "purpose_notes",
                    FieldType.OBJECT,
                    fields=(
                        _text("discover", "Find out what really troubles the users.", "why this phase matters"),
                        _text("define", "Decide what the product must and must not do.", "why this phase matters"),
                        _text("develop", "Turn the requirements into a testable form.", "why this phase matters"),
                        _text("deliver", "Get the product made, priced and sold.", "why this phase matters"),
                    ),
                ),
            ),
        ),
        FieldSpec(
            "experts_to_meet",
            FieldType.OBJECT_ARRAY,
            default=[{"role": "Product designer", "why": "To shape form, usability and fit together."}],
            non_empty=True,
            fields=(
                _text("role", "Product designer", "expert role"),
                _text("why", "To shape form, usability and fit together.", "how they help"),
            ),
        ),
        FieldSpec(
            "expert_reviews",
            FieldType.OBJECT,
            fields=(
                _review("pm", "Demand is unvalidated", "Define the MVP scope", "Target and scenario fit on one page"),
                _review("designer", "Usability is unverified", "Sketch the usage scenario", "Wearing/using takes three steps or fewer"),
                _review("engineer", "Technical feasibility is open", "Fix target numbers for size and power", "Draft BOM exists"),
                _review("marketer", "Message may be unclear", "Compare 3-5 competitor prices", "One-line pitch is ready"),
            ),
        ),
    ),
)


# Static brief returned when the language model cannot be used.
FALLBACK_BRIEF: dict = {
    "target_and_problem": {
        "summary": "Cleaner breathing and a more comfortable run for outdoor runners",
        "details": (
            "City runners are constantly exposed to fine dust, exhaust fumes and pollen. "
            "Early-morning and late-night runs along busy roads make the problem worse. "
            "A portable, wearable mini air purifier reduces that exposure and gives both "
            "performance and lifestyle runners a real and felt sense of safety."
        ),
    },
    "key_features": [
        {"name": "Running-optimized purification module", "description": "Filters air without restricting breathing during exercise."},
        {"name": "Comfort-first wearable form factor", "description": "Low wobble and a stable centre of gravity while running."},
        {"name": "Real-time air quality feedback", "description": "LED or app shows current air quality and filter replacement time."},
        {"name": "Everyday water resistance", "description": "Survives sweat, rain and night-time runs."},
    ],
    "differentiation": [
        {"point": "Built for running", "strategy": "Positioned against generic masks and room purifiers as running gear."},
        {"point": "Style meets performance", "strategy": "A design language that sports brands can collaborate on."},
        {"point": "Peace of mind", "strategy": "Data-driven feedback makes invisible risks visible."},
    ],
    "concept_and_references": {
        "concept_summary": (
            "A 'personal clean-air bubble' for urban runners: a minimal device that never gets "
            "in the way of the stride, opening a category between performance and lifestyle gear."
        ),
        "reference_keywords": [
            "running wearable device",
            "neckband air purifier",
            "minimal sport tech",
            "urban night runner",
        ],
    },
    "visual_rfp": {
        "project_title": "Mini wearable air purifier for outdoor runners",
        "background": "Urban running keeps growing, and so does concern about air pollution.",
        "objective": "Deliver real purification and reassurance with minimal wearing burden.",
        "target_users": "Urban outdoor runners in their 20s to 40s",
        "core_requirements": [
            "Wearing structure that does not interfere with running",
            "Fine dust and pollutant filtering performance",
            "Simple form that suits night running",
            "Replaceable filter and rechargeable battery",
        ],
        "design_direction": (
            "Slim, streamlined silhouette on a black or deep grey base with an accent colour, "
            "blending naturally with running wear."
        ),
        "deliverables": [
            "Product concept board",
            "3D product renderings including wearing scenarios",
            "Basic dimensions and structure diagram",
            "UI / LED indicator flow",
            "Brand and naming proposal",
        ],
    },
    "double_diamond": {
        "discover": {
            "goals": ["Understand the problem context", "Segment target runners"],
            "tasks": [
                {"title": "Interview five running crew members", "owner": "PM/Researcher"},
                {"title": "Scan competitors and substitutes", "owner": "PM/Designer"},
            ],
            "deliverables": ["Insight memo", "Competitive positioning map"],
        },
        "define": {
            "goals": ["Define product requirements", "Set performance and cost guardrails"],
            "tasks": [
                {"title": "Write the requirements matrix", "owner": "PM"},
                {"title": "Agree on key performance metrics", "owner": "PM/Engineer/Designer"},
            ],
            "deliverables": ["PRD v1", "Requirements matrix"],
        },
        "develop": {
            "goals": ["Design and build prototypes", "Prepare certification and production"],
            "tasks": [
                {"title": "Structural design and part selection", "owner": "Engineer"},
                {"title": "3D / CMF mockups", "owner": "Designer"},
            ],
            "deliverables": ["3D STEP files", "BOM v1", "Mockup photos"],
        },
        "deliver": {
            "goals": ["Production, launch and sales"],
            "tasks": [
                {"title": "Manufacturer RFQ and purchase order", "owner": "PM/Purchasing"},
                {"title": "Packaging, labels and manual", "owner": "Designer/MD"},
                {"title": "Launch plan", "owner": "Marketer"},
            ],
            "deliverables": ["Production schedule", "Packaging files", "Launch calendar"],
        },
        "overall_budget_time": {
            "total_budget_krw": "About 30 to 50 million KRW",
            "total_time_weeks": "About 10 to 16 weeks",
            "ratio": {"discover": "15%", "define": "15%", "develop": "45%", "deliver": "25%"},
            "notes": "Tooling and certification costs dominate; get two manufacturer quotes before fixing the budget.",
        },
        "purpose_notes": {
            "discover": "Confirm that runners actually worry about the air they breathe and when.",
            "define": "Fix weight, runtime and filtering targets the whole team designs against.",
            "develop": "Prove the wearable form and the airflow work together on real runs.",
            "deliver": "Reach the first runners through a channel that can explain a new category.",
        },
    },
    "experts_to_meet": [
        {"role": "Product designer", "why": "To design form, usability and fit together."},
        {"role": "Engineer (mechanical/electronics)", "why": "To review parts, power, heat and noise."},
        {"role": "Manufacturer / tooling shop", "why": "To align feasibility, cost and lead time."},
        {"role": "Marketer / MD", "why": "To settle positioning, pricing and channels."},
    ],
    "expert_reviews": {
        "pm": {
            "risks": [
                "Defining the product without validating it with real runners may leave demand weak.",
                "Ignoring part lead times and certification can delay the launch.",
            ],
            "asks": [
                "Fix a minimal MVP scope first.",
                "List market, technical and schedule risks and rank them.",
            ],
            "checklist": [
                "Are the core target and usage scenario summarized on one page?",
                "Are a target launch date and a rough budget range set?",
            ],
        },
        "designer": {
            "risks": [
                "Unverified mounting position and weight balance can make running uncomfortable.",
                "Focusing on styling alone may miss washing, storage and charging contexts.",
            ],
            "asks": [
                "Sketch the before, during and after run scenario, even as a simple comic.",
                "Composite the device onto real running-wear photos to check the fit.",
            ],
            "checklist": [
                "Can putting it on and taking it off be explained in three steps?",
                "Is there a defined fastening method that limits wobble while running?",
            ],
        },
        "engineer": {
            "risks": [
                "Battery capacity, weight and safety standards are hard to satisfy at once.",
                "Fan or motor noise and vibration can spoil the experience.",
            ],
            "asks": [
                "Put numbers on target runtime and acceptable weight first.",
                "List the usage environment (rain, sweat, temperature) and estimate the protection rating.",
            ],
            "checklist": [
                "Is there a draft BOM of power, fan and sensor parts?",
                "Have the required electrical and radio certifications been checked?",
            ],
        },
        "marketer": {
            "risks": [
                "'Wearable air purifier' is a new idea and the message may feel hard to grasp.",
                "A price above typical running accessories needs stronger persuasion points.",
            ],
            "asks": [
                "Explain in one line how it works with existing gear such as watches and earphones.",
                "Tabulate the prices and review points of 3-5 similar products.",
            ],
            "checklist": [
                "Is a one-line explanation ready for people who never owned one?",
                "Is the first launch channel decided (crowdfunding, own store, marketplace)?",
            ],
        },
    },
}
