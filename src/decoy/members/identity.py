"""InterceptorIdentity: the public handle test code uses for one logical member."""

from dataclasses import dataclass
from enum import Enum

from decoy.members.signature import MemberKind, MemberSignature


class IdentityShape(Enum):
    PLAIN = "plain"
    OVERLOAD_GROUP = "overload_group"
    GENERIC_METHOD = "generic_method"
    INDEXER = "indexer"


@dataclass(frozen=True)
class SignatureSlot:
    """One distinct signature inside an identity, with its routing key."""
    key: str
    signature: MemberSignature
    contracts: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "parameter_types": list(self.signature.parameter_types),
            "parameter_names": list(self.signature.parameter_names),
            "return_type": self.signature.return_type,
            "generic_arity": self.signature.generic_arity,
            "writable": self.signature.writable,
            "contracts": list(self.contracts),
        }


@dataclass(frozen=True)
class InterceptorIdentity:
    name: str
    member_name: str
    kind: MemberKind
    shape: IdentityShape
    slots: tuple[SignatureSlot, ...]

    @property
    def contracts(self) -> tuple[str, ...]:
        seen = []
        for slot in self.slots:
            for contract in slot.contracts:
                if contract not in seen:
                    seen.append(contract)
        return tuple(seen)

    @property
    def signatures(self) -> tuple[MemberSignature, ...]:
        return tuple(slot.signature for slot in self.slots)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(slot.key for slot in self.slots)

    @property
    def is_overloaded(self) -> bool:
        return len(self.slots) > 1

    def slot(self, key: str) -> SignatureSlot:
        for slot in self.slots:
            if slot.key == key:
                return slot
        raise KeyError(f"{self.name} has no signature {key!r}")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "member_name": self.member_name,
            "kind": self.kind.value,
            "shape": self.shape.value,
            "contracts": list(self.contracts),
            "signatures": [slot.to_dict() for slot in self.slots],
        }
