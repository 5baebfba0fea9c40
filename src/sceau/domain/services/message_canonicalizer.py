"""
Message canonicalization for Sign-In-With-Solana.

Builds the exact text a wallet signs for a challenge. Each field sits on
its own labelled line and challenge fields cannot contain line breaks, so
no crafted value can spill into a neighbouring field. Optional fields are
emitted only when present.

Layout:
    {domain} wants you to sign in with your Solana account:
    {address}

    {statement}

    URI: {uri}
    Version: {version}
    Chain ID: {chain_id}
    Nonce: {nonce}
    Issued At: {issued_at}
    Expiration Time: {expiration_time}
    Not Before: {not_before}
    Request ID: {request_id}
    Resources:
    - {resource}
"""

from typing import List

from sceau.domain.entities.challenge import Challenge
from sceau.domain.value_objects.timestamp import format_timestamp

HEADER_SUFFIX = " wants you to sign in with your Solana account:"


def build_message_text(challenge: Challenge, signer_identity: str) -> str:
    """
    Build canonical message text.

    Args:
        challenge: Challenge to render
        signer_identity: Signer address (base58 public key)

    Returns:
        Message text, lines joined with LF

    Raises:
        ValueError: If signer_identity is empty or spans several lines
    """
    if not signer_identity or "\n" in signer_identity or "\r" in signer_identity:
        raise ValueError("Signer identity must be a single non-empty line")

    lines: List[str] = [
        f"{challenge.domain}{HEADER_SUFFIX}",
        signer_identity,
        "",
        challenge.statement,
        "",
        f"URI: {challenge.uri}",
        f"Version: {challenge.version}",
    ]

    if challenge.chain_id is not None:
        lines.append(f"Chain ID: {challenge.chain_id}")

    lines.append(f"Nonce: {challenge.nonce}")
    lines.append(f"Issued At: {format_timestamp(challenge.issued_at)}")

    if challenge.expiration_time is not None:
        lines.append(
            f"Expiration Time: {format_timestamp(challenge.expiration_time)}"
        )
    if challenge.not_before is not None:
        lines.append(f"Not Before: {format_timestamp(challenge.not_before)}")
    if challenge.request_id is not None:
        lines.append(f"Request ID: {challenge.request_id}")
    if challenge.resources is not None:
        lines.append("Resources:")
        lines.extend(f"- {resource}" for resource in challenge.resources)

    return "\n".join(lines)


def canonicalize(challenge: Challenge, signer_identity: str) -> bytes:
    """
    Canonical bytes a signer must sign for this challenge.

    Pure and deterministic: identical inputs always give identical bytes.

    Args:
        challenge: Challenge to render
        signer_identity: Signer address (base58 public key)

    Returns:
        UTF-8 encoded message
    """
    return build_message_text(challenge, signer_identity).encode("utf-8")
