from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from loguru import logger
from solders.instruction import AccountMeta, CompiledInstruction, Instruction
from solders.message import MessageHeader
from solders.pubkey import Pubkey


class ResolveError(Exception):
    """A compiled instruction could not be turned into a resolved one."""


class IndexOutOfRange(ResolveError):
    pass


class InvalidHeader(ResolveError):
    pass


def program_id_of(account_keys: Sequence[Pubkey], compiled: CompiledInstruction) -> Pubkey:
    program_id_index = compiled.program_id_index
    if program_id_index >= len(account_keys):
        raise IndexOutOfRange(
            f"program_id_index {program_id_index} out of range for {len(account_keys)} account keys"
        )
    return account_keys[program_id_index]


def resolve_instruction(
    account_keys: Sequence[Pubkey],
    header: MessageHeader,
    compiled: CompiledInstruction,
) -> Instruction:
    """
    Expand a compiled instruction against the message's static account keys.

    Signer and writable flags are derived from position alone:
    ``is_signer = i < num_required_signatures`` and
    ``is_writable = i < (num_required_signatures - num_readonly_signed_accounts)
    + num_readonly_unsigned_accounts``.

    Raises IndexOutOfRange if the program index or any account index falls
    outside the key table. Every account index is checked before giving up so
    each bad one gets logged.
    """
    n_keys = len(account_keys)
    program_id = program_id_of(account_keys, compiled)

    num_signers = header.num_required_signatures
    if header.num_readonly_signed_accounts > num_signers:
        raise InvalidHeader(
            f"num_readonly_signed_accounts {header.num_readonly_signed_accounts} "
            f"exceeds num_required_signatures {num_signers}"
        )
    num_writable_signers = num_signers - header.num_readonly_signed_accounts
    num_writable_accounts = num_writable_signers + header.num_readonly_unsigned_accounts

    accounts: list[AccountMeta] = []
    bad: list[int] = []
    for i in compiled.accounts:
        if i >= n_keys:
            logger.warning("Account index {} out of range for {} account keys", i, n_keys)
            bad.append(i)
            continue
        accounts.append(
            AccountMeta(
                pubkey=account_keys[i],
                is_signer=i < num_signers,
                is_writable=i < num_writable_accounts,
            )
        )
    if bad:
        raise IndexOutOfRange(f"account indices {bad} out of range for {n_keys} account keys")

    logger.debug("Resolved instruction: program_id={} accounts={}", program_id, len(accounts))
    return Instruction(program_id=program_id, data=bytes(compiled.data), accounts=accounts)


@dataclass(frozen=True)
class ProgramFilter:
    target: Pubkey

    @classmethod
    def from_string(cls, program_id: str) -> ProgramFilter:
        return cls(target=Pubkey.from_string(program_id))

    def accepts(self, program_id: Pubkey) -> bool:
        return program_id == self.target
