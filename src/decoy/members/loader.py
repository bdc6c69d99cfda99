"""Load member descriptions from the JSON the metadata extractor writes."""

import json
from pathlib import Path

from decoy.members.signature import MemberKind, MemberSignature


def load_members_file(path: str | Path) -> list[MemberSignature]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: not valid JSON ({e.msg} at line {e.lineno})") from e
    return load_members(data)


def load_members(data: dict) -> list[MemberSignature]:
    """Parse ``{"members": [...]}`` into signatures, in declaration order."""
    if not isinstance(data, dict) or not isinstance(data.get("members"), list):
        raise ValueError('member file must be an object with a "members" list')
    return [_parse_member(index, raw) for index, raw in enumerate(data["members"])]


def _parse_member(index, raw):
    if not isinstance(raw, dict):
        raise ValueError(f"member {index}: expected an object")
    try:
        kind = MemberKind(raw["kind"])
    except KeyError:
        raise ValueError(f"member {index}: missing 'kind'") from None
    except ValueError:
        allowed = ", ".join(k.value for k in MemberKind)
        raise ValueError(f"member {index}: unknown kind {raw['kind']!r} (expected one of {allowed})") from None

    for required in ("name", "contract"):
        if not raw.get(required):
            raise ValueError(f"member {index}: missing {required!r}")

    parameters = raw.get("parameters", [])
    if not isinstance(parameters, list):
        raise ValueError(f"member {index}: 'parameters' must be a list")
    types, names = [], []
    for position, parameter in enumerate(parameters):
        if isinstance(parameter, str):
            types.append(parameter)
            names.append(f"arg{position}")
        elif isinstance(parameter, dict) and parameter.get("type"):
            types.append(parameter["type"])
            names.append(parameter.get("name") or f"arg{position}")
        else:
            raise ValueError(f"member {index}: parameter {position} needs a 'type'")

    try:
        return MemberSignature(
            kind=kind,
            name=raw["name"],
            contract=raw["contract"],
            parameter_types=tuple(types),
            return_type=raw.get("returns"),
            generic_arity=int(raw.get("generic_arity", 0)),
            parameter_names=tuple(names),
            writable=bool(raw.get("writable", False)),
        )
    except ValueError as e:
        raise ValueError(f"member {index}: {e}") from e
