"""Human-readable and JSON views of a Resolution."""

import json

from decoy.members.resolver import Resolution
from decoy.templates.template_renderer import render_template


def _identity_rows(resolution):
    return [
        {
            "name": identity.name,
            "kind": identity.kind.value,
            "shape": identity.shape.value,
            "contracts": identity.contracts,
            "slots": [
                {
                    "key": slot.key,
                    "parameters": ", ".join(slot.signature.parameter_types),
                    "returns": slot.signature.return_type or "",
                }
                for slot in identity.slots
            ],
        }
        for identity in resolution.identities
    ]


def render_text(resolution: Resolution, show_identities: bool = True) -> str:
    """Identities with their signature slots, followed by any conflicts."""
    return render_template(
        "resolution.j2",
        package="decoy.report",
        show_identities=show_identities,
        identities=_identity_rows(resolution) if show_identities else [],
        conflicts=[str(conflict) for conflict in resolution.conflicts],
    )


def render_json(resolution: Resolution) -> str:
    return json.dumps(resolution.to_dict(), indent=2)
