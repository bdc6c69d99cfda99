"""Overload grouper: folds non-conflicting partitions of one member name into identity drafts."""

from dataclasses import dataclass, field

from decoy.errors import ConfigurationConflict
from decoy.members.identity import IdentityShape, SignatureSlot
from decoy.members.signature import MemberKind, MemberSignature, signature_key, type_suffix

GENERIC_SUFFIX = "Generic"
INDEXER_NAME = "Indexer"


@dataclass
class Partition:
    """Declarations of one member that share an exact signature."""
    signature: MemberSignature
    contracts: list[str] = field(default_factory=list)

    def add(self, signature: MemberSignature) -> None:
        # A read-only and a read-write declaration merge into one writable member.
        if signature.writable and not self.signature.writable:
            self.signature = signature
        if signature.contract not in self.contracts:
            self.contracts.append(signature.contract)

    @property
    def spans_contracts(self) -> bool:
        return len(self.contracts) > 1


@dataclass
class IdentityDraft:
    """An identity before the resolver has given it a unique public name."""
    base_name: str
    member_name: str
    kind: MemberKind
    shape: IdentityShape
    slots: list[SignatureSlot] = field(default_factory=list)

    def slot_for(self, key: str) -> SignatureSlot | None:
        for slot in self.slots:
            if slot.key == key:
                return slot
        return None


def group_partitions(kind: MemberKind, name: str, partitions: list[Partition]):
    """Turn one ``(kind, name)`` group into identity drafts.

    Returns ``(drafts, conflicts)``. A draft with a key collision is withheld
    and its conflict reported instead.
    """
    if kind is MemberKind.METHOD:
        return _group_methods(name, partitions)
    if kind is MemberKind.INDEXER:
        return _group_indexers(name, partitions)
    drafts = [
        IdentityDraft(name, name, kind, IdentityShape.PLAIN, [_slot(p, p.signature.key)])
        for p in partitions
    ]
    return drafts, []


def _group_methods(name, partitions):
    plain = [p for p in partitions if not p.signature.is_generic]
    generic = [p for p in partitions if p.signature.is_generic]
    drafts, conflicts = [], []

    if plain:
        shape = IdentityShape.PLAIN if len(plain) == 1 else IdentityShape.OVERLOAD_GROUP
        draft = IdentityDraft(name, name, MemberKind.METHOD, shape)
        _fill(draft, plain, drafts, conflicts)

    if generic:
        base = name + GENERIC_SUFFIX if plain else name
        draft = IdentityDraft(base, name, MemberKind.METHOD, IdentityShape.GENERIC_METHOD)
        _fill(draft, generic, drafts, conflicts)

    return drafts, conflicts


def _fill(draft, partitions, drafts, conflicts):
    for partition in partitions:
        key = partition.signature.key
        existing = draft.slot_for(key)
        if existing is not None:
            conflicts.append(_key_collision(draft.member_name, existing, partition, key))
            return
        draft.slots.append(_slot(partition, key))
    drafts.append(draft)


def _group_indexers(name, partitions):
    drafts, conflicts = [], []
    withheld = set()
    for partition in partitions:
        key = signature_key(partition.signature.parameter_types)
        collision = _colliding_slot(drafts, partition, key)
        if collision is not None:
            draft, existing = collision
            conflicts.append(_key_collision(name, existing, partition, key))
            withheld.add(id(draft))
            continue
        # Same key types with another value type cannot share a call path.
        target = next((d for d in drafts if d.slot_for(key) is None), None)
        if target is None:
            target = IdentityDraft(
                INDEXER_NAME, partition.signature.name, MemberKind.INDEXER, IdentityShape.INDEXER
            )
            drafts.append(target)
        target.slots.append(_slot(partition, key))
    return [d for d in drafts if id(d) not in withheld], conflicts


def _colliding_slot(drafts, partition, key):
    # Spellings of one type share a key; only distinct key types may not.
    key_types = _key_types(partition.signature)
    for draft in drafts:
        existing = draft.slot_for(key)
        if existing is not None and _key_types(existing.signature) != key_types:
            return draft, existing
    return None


def _key_types(signature):
    return tuple(type_suffix(t) for t in signature.parameter_types)


def _slot(partition, key):
    return SignatureSlot(key=key, signature=partition.signature, contracts=tuple(partition.contracts))


def _key_collision(member_name, existing, partition, key):
    contracts = list(existing.contracts)
    for contract in partition.contracts:
        if contract not in contracts:
            contracts.append(contract)
    return ConfigurationConflict(
        member_name,
        contracts,
        partition.signature.parameter_types,
        reason=(
            f"derives signature key {key!r} already taken by "
            f"({', '.join(existing.signature.parameter_types)})"
        ),
    )
