"""Member identity resolver: one collision-free public identity per abstract member.

A resolver is built per generation unit and holds no state between calls, so
resolving the same members twice gives the same names. Stable names matter to
the emission layer, which reruns incrementally.
"""

from dataclasses import dataclass, field

import structlog

from decoy.errors import ConfigurationConflict
from decoy.members.grouper import INDEXER_NAME, Partition, group_partitions
from decoy.members.identity import InterceptorIdentity
from decoy.members.signature import MemberKind, MemberSignature

logger = structlog.get_logger()

_KIND_ORDER = (MemberKind.PROPERTY, MemberKind.INDEXER, MemberKind.METHOD, MemberKind.EVENT)


@dataclass
class Resolution:
    identities: list[InterceptorIdentity] = field(default_factory=list)
    conflicts: list[ConfigurationConflict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.conflicts

    @property
    def names(self) -> list[str]:
        return [identity.name for identity in self.identities]

    def identity(self, name: str) -> InterceptorIdentity:
        for identity in self.identities:
            if identity.name == name:
                return identity
        raise KeyError(f"no interceptor identity named {name!r}")

    def identities_for(self, member_name: str) -> list[InterceptorIdentity]:
        return [i for i in self.identities if i.member_name == member_name]

    def raise_for_conflicts(self) -> None:
        if not self.conflicts:
            return
        first = self.conflicts[0]
        first.all_conflicts = list(self.conflicts)
        raise first

    def to_dict(self) -> dict:
        return {
            "identities": [identity.to_dict() for identity in self.identities],
            "conflicts": [
                {
                    "member_name": c.member_name,
                    "contracts": list(c.contracts),
                    "signature": list(c.signature),
                    "reason": c.reason,
                }
                for c in self.conflicts
            ],
        }


class MemberResolver:
    """Decides canonical interceptor names and rejects ambiguous declarations."""

    def __init__(self, reserved_names=()):
        self._reserved = tuple(reserved_names)
        self._logger = logger.bind(system="members.resolver")

    def resolve(self, members: list[MemberSignature]) -> Resolution:
        groups = _group_by_name(members)
        used = set(self._reserved)
        resolution = Resolution()

        for kind in _KIND_ORDER:
            for (group_kind, name), partitions in groups.items():
                if group_kind is not kind:
                    continue
                self._resolve_group(kind, name, partitions, used, resolution)

        self._logger.debug(
            "resolution_complete",
            members=len(members),
            identities=len(resolution.identities),
            conflicts=len(resolution.conflicts),
        )
        return resolution

    def _resolve_group(self, kind, name, partitions, used, resolution):
        conflicts = _cross_contract_conflicts(kind, name, partitions)
        if conflicts:
            # The whole overload group depends on the ambiguous signature.
            for conflict in conflicts:
                self._logger.warning(
                    "member_conflict",
                    member=name,
                    contracts=list(conflict.contracts),
                    signature=list(conflict.signature),
                )
            resolution.conflicts.extend(conflicts)
            return

        drafts, draft_conflicts = group_partitions(kind, name, partitions)
        for conflict in draft_conflicts:
            self._logger.warning("member_conflict", member=name, reason=conflict.reason)
        resolution.conflicts.extend(draft_conflicts)

        for draft in drafts:
            public_name = _unique_name(draft.base_name, used)
            used.add(public_name)
            resolution.identities.append(InterceptorIdentity(
                name=public_name,
                member_name=draft.member_name,
                kind=draft.kind,
                shape=draft.shape,
                slots=tuple(draft.slots),
            ))


def _group_by_name(members):
    """``{(kind, name): [Partition, ...]}`` in first-seen order."""
    groups: dict[tuple, dict] = {}
    for member in members:
        name = INDEXER_NAME if member.kind is MemberKind.INDEXER else member.name
        partitions = groups.setdefault((member.kind, name), {})
        partition = partitions.get(member.partition_key)
        if partition is None:
            partition = partitions[member.partition_key] = Partition(member)
        partition.add(member)
    return {key: list(partitions.values()) for key, partitions in groups.items()}


def _cross_contract_conflicts(kind, name, partitions):
    if kind is not MemberKind.METHOD:
        return []
    return [
        ConfigurationConflict(name, p.contracts, p.signature.parameter_types)
        for p in partitions
        if p.spans_contracts
    ]


def _unique_name(base, used):
    if base not in used:
        return base
    suffix = 2
    while f"{base}{suffix}" in used:
        suffix += 1
    return f"{base}{suffix}"
