"""
ogclaim CLI - Command Line Interface for ownership-snapshot claims

Main entry point for all CLI commands.
"""

import json
from pathlib import Path
from typing import List, Optional

import click

from ogclaim import __version__
from ogclaim.utils.logger import setup_logging


def _load_proof_args(proof: List[str]) -> List[bytes]:
    from ogclaim.crypto import hex_to_bytes
    from ogclaim.utils.validation import HASH_SIZE, validate_hex_string

    siblings = []
    for i, item in enumerate(proof):
        valid, err = validate_hex_string(item, f"proof[{i}]", expected_bytes=HASH_SIZE)
        if not valid:
            raise click.BadParameter(err, param_hint="--proof")
        siblings.append(hex_to_bytes(item))
    return siblings


def _resolve_proof(
    token_id: int,
    proof: List[str],
    proofs_file: Optional[str],
) -> Optional[List[bytes]]:
    """Proof from --proof values, or looked up in a proofs file."""
    from ogclaim.crypto import hex_to_bytes
    from ogclaim.core.storage import find_proof, read_proofs_file

    if proof:
        return _load_proof_args(proof)
    if not proofs_file:
        raise click.UsageError("Provide --proof values or --proofs-file")

    try:
        entry = find_proof(read_proofs_file(proofs_file), token_id)
    except ValueError as e:
        raise click.ClickException(f"Invalid proofs file: {e}")
    if entry is None:
        return None
    return [hex_to_bytes(item) for item in entry.proof]


def _resolve_root(root: Optional[str], root_file: Optional[str]) -> bytes:
    from ogclaim.crypto import hex_to_bytes
    from ogclaim.core.storage import read_root_file
    from ogclaim.utils.validation import HASH_SIZE, validate_hex_string

    if root:
        valid, err = validate_hex_string(root, "root", expected_bytes=HASH_SIZE)
        if not valid:
            raise click.BadParameter(err, param_hint="--root")
        return hex_to_bytes(root)
    if root_file:
        try:
            return read_root_file(root_file).root
        except ValueError as e:
            raise click.ClickException(str(e))
    raise click.UsageError("Provide --root or --root-file")


def _open_registry(ctx, owner: Optional[str] = None):
    from ogclaim.core.registry import ClaimLedger, RootRegistry
    from ogclaim.core.storage import StorageManager

    config = ctx.obj["config"]
    storage = StorageManager(config.data_dir, config.registry_db)
    owner = owner or config.registry_owner or storage.load_owner()
    if owner is None:
        raise click.UsageError(
            "Registry has no owner yet; pass --owner or set OGCLAIM_REGISTRY_OWNER"
        )
    try:
        registry = RootRegistry(owner=owner, storage=storage)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--owner")
    return registry, ClaimLedger(registry, storage=storage)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--data-dir", default=None, help="Data directory (default: ./data)")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True), help="JSON config file")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug, data_dir, config_path):
    """ogclaim - Merkle ownership-snapshot claims"""
    from ogclaim.core.config import load_config

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))
    if data_dir:
        config.data_dir = Path(data_dir).expanduser()
    config.ensure_dirs()

    try:
        setup_logging(
            level="DEBUG" if debug else config.log_level,
            log_dir=str(config.log_dir),
            log_to_file=config.log_to_file,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Generation Commands
# =============================================================================


@cli.command("generate")
@click.option("--snapshot", "snapshot_path", default=None, help="Snapshot file (default: <data-dir>/zoraSnapshot.json)")
@click.option("--out-dir", default=None, help="Output directory (default: data dir)")
@click.pass_context
def generate_cmd(ctx, snapshot_path, out_dir):
    """Build the Merkle root and all proofs from a snapshot"""
    from ogclaim.core.generator import generate, write_outputs
    from ogclaim.core.snapshot import load_snapshot

    config = ctx.obj["config"]
    snapshot_path = Path(snapshot_path) if snapshot_path else config.snapshot_path
    if not snapshot_path.exists():
        raise click.ClickException(f"Snapshot file not found: {snapshot_path}")

    try:
        snapshot = load_snapshot(snapshot_path)
    except ValueError as e:
        raise click.ClickException(f"Invalid snapshot: {e}")

    if len(snapshot) == 0:
        raise click.ClickException("Snapshot is empty; refusing to generate an empty-tree root")

    result = generate(snapshot)
    root_path, proofs_path = write_outputs(result, out_dir or config.data_dir)

    click.echo(f"Merkle Root: {result.tree.hex_root}")
    click.echo(f"  Leaves: {result.leaf_count}")
    click.echo(f"  Root file: {root_path}")
    click.echo(f"  Proofs file: {proofs_path}")


@cli.command("prove")
@click.option("--snapshot", "snapshot_path", default=None, help="Snapshot file")
@click.option("--token-id", required=True, type=int, help="Token to prove")
@click.option("--owner", required=True, help="Owner address (0x...)")
@click.pass_context
def prove_cmd(ctx, snapshot_path, token_id, owner):
    """Print the proof for one (tokenId, owner) pair as JSON"""
    from ogclaim.core.merkle import MerkleTree, encode_leaf
    from ogclaim.core.snapshot import load_snapshot

    config = ctx.obj["config"]
    try:
        snapshot = load_snapshot(snapshot_path or config.snapshot_path)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Cannot load snapshot: {e}")
    tree = MerkleTree.build(snapshot.leaves())

    try:
        leaf = encode_leaf(token_id, owner)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--owner")

    proof = tree.hex_proof(leaf)
    if proof is None:
        raise click.ClickException(f"Token {token_id} owned by {owner} is not eligible")

    click.echo(json.dumps({"tokenId": token_id, "owner": owner, "root": tree.hex_root, "proof": proof}, indent=2))


@cli.command("verify")
@click.option("--token-id", required=True, type=int, help="Token being claimed")
@click.option("--owner", required=True, help="Owner address (0x...)")
@click.option("--proof", multiple=True, help="Sibling hash (repeatable, leaf layer first)")
@click.option("--proofs-file", default=None, type=click.Path(exists=True), help="merkleProofs.json")
@click.option("--root", default=None, help="Expected root (0x...)")
@click.option("--root-file", default=None, type=click.Path(exists=True), help="merkleRoot.json")
@click.pass_context
def verify_cmd(ctx, token_id, owner, proof, proofs_file, root, root_file):
    """Pre-flight check: does this proof verify against the root?"""
    from ogclaim.core.merkle import verify_claim

    expected_root = _resolve_root(root, root_file)
    siblings = _resolve_proof(token_id, list(proof), proofs_file)
    if siblings is None:
        click.echo(f"✗ Token {token_id}: no proof found (not eligible)")
        ctx.exit(1)

    try:
        valid = verify_claim(token_id, owner, siblings, expected_root)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--owner")

    if valid:
        click.echo(f"✓ Proof valid for token {token_id}")
    else:
        click.echo(f"✗ Proof rejected for token {token_id}")
        ctx.exit(1)


@cli.command("debug")
@click.option("--token-id", required=True, type=int, help="Token being claimed")
@click.option("--owner", required=True, help="Owner address (0x...)")
@click.option("--proof", multiple=True, help="Sibling hash (repeatable)")
@click.option("--proofs-file", default=None, type=click.Path(exists=True), help="merkleProofs.json")
@click.option("--root", default=None, help="Expected root (0x...)")
@click.option("--root-file", default=None, type=click.Path(exists=True), help="merkleRoot.json")
@click.pass_context
def debug_cmd(ctx, token_id, owner, proof, proofs_file, root, root_file):
    """Explain a verification, including encoding mismatches"""
    from ogclaim.core.merkle import explain_verification

    expected_root = _resolve_root(root, root_file)
    siblings = _resolve_proof(token_id, list(proof), proofs_file)
    if siblings is None:
        click.echo(f"✗ Token {token_id}: no proof found (not eligible)")
        ctx.exit(1)

    try:
        report = explain_verification(token_id, owner, siblings, expected_root)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--owner")
    click.echo("Debug Merkle Verification:")
    for line in report.lines():
        click.echo(f"  {line}")


# =============================================================================
# Registry Commands
# =============================================================================


@cli.group()
def registry():
    """Local root registry and claim ledger"""
    pass


@registry.command("publish")
@click.option("--root", default=None, help="Root to publish (0x...)")
@click.option("--root-file", default=None, type=click.Path(exists=True), help="merkleRoot.json")
@click.option("--caller", required=True, help="Address publishing the root")
@click.option("--owner", default=None, help="Registry owner (first use only)")
@click.pass_context
def registry_publish(ctx, root, root_file, caller, owner):
    """Publish a new root (supersedes all earlier proofs)"""
    from ogclaim.core.storage import read_root_file

    new_root = _resolve_root(root, root_file)
    leaf_count = 0
    if root_file and not root:
        leaf_count = read_root_file(root_file).leaf_count or 0

    reg, _ = _open_registry(ctx, owner)
    try:
        record, err = reg.update_root(new_root, caller, leaf_count=leaf_count)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--caller")
    if record is None:
        raise click.ClickException(err)

    click.echo(f"✓ Root v{record.version} published: {record.hex_root}")


@registry.command("status")
@click.option("--token-id", default=None, type=int, help="Show claim status for a token")
@click.pass_context
def registry_status(ctx, token_id):
    """Show the current root and claim counts"""
    from ogclaim.crypto import checksum_address

    reg, ledger = _open_registry(ctx)
    record = reg.current_record()

    click.echo("Registry Status")
    click.echo("-" * 40)
    click.echo(f"  Owner: {checksum_address(reg.owner)}")
    if record is None:
        click.echo("  Root: (none published)")
    else:
        click.echo(f"  Root: v{record.version} {record.hex_root}")
        click.echo(f"  Leaves: {record.leaf_count}")
    click.echo(f"  Claimed: {ledger.claimed_count}")

    if token_id is not None:
        claim = ledger.claim_record(token_id)
        if claim is None:
            click.echo(f"  Token {token_id}: unclaimed")
        else:
            click.echo(
                f"  Token {token_id}: claimed by {checksum_address(claim.claimer)} (root v{claim.root_version})"
            )


@registry.command("claim")
@click.option("--token-id", required=True, type=int, help="Token to claim")
@click.option("--claimer", required=True, help="Claiming address")
@click.option("--proof", multiple=True, help="Sibling hash (repeatable)")
@click.option("--proofs-file", default=None, type=click.Path(exists=True), help="merkleProofs.json")
@click.pass_context
def registry_claim(ctx, token_id, claimer, proof, proofs_file):
    """Claim a token against the current root"""
    siblings = _resolve_proof(token_id, list(proof), proofs_file)
    if siblings is None:
        raise click.ClickException(f"Token {token_id}: no proof found (not eligible)")

    _, ledger = _open_registry(ctx)
    record, err = ledger.claim(token_id, claimer, siblings)
    if record is None:
        raise click.ClickException(f"Claim rejected: {err}")

    click.echo(f"✓ Token {token_id} claimed (root v{record.root_version})")


# =============================================================================
# Demo / Bench
# =============================================================================


@cli.command("demo")
@click.option("--holders", default=5, type=click.IntRange(1, 1000), help="Synthetic snapshot size")
def demo(holders):
    """Run an end-to-end snapshot -> root -> claim walkthrough in memory"""
    from ogclaim.crypto import generate_keypair
    from ogclaim.core.generator import generate
    from ogclaim.core.merkle import OwnershipRecord, encode_leaf_packed, verify_proof
    from ogclaim.core.registry import ClaimLedger, RootRegistry
    from ogclaim.core.snapshot import Snapshot

    click.echo("=" * 60)
    click.echo("  OGCLAIM - DEMO")
    click.echo("=" * 60)
    click.echo()

    click.echo("📸 Taking synthetic snapshot...")
    keypairs = [generate_keypair() for _ in range(holders)]
    snapshot = Snapshot(
        OwnershipRecord(token_id=i + 1, owner=kp.address_bytes) for i, kp in enumerate(keypairs)
    )
    click.echo(f"  ✓ {len(snapshot)} tokens")
    click.echo()

    click.echo("🌳 Building Merkle tree...")
    result = generate(snapshot)
    click.echo(f"  ✓ Root: {result.tree.hex_root}")
    click.echo(f"  ✓ Depth: {result.tree.depth}")
    click.echo()

    click.echo("🏛️  Publishing root...")
    admin = generate_keypair()
    reg = RootRegistry(owner=admin.address_bytes)
    reg.update_root(result.root, admin.address_bytes, leaf_count=result.leaf_count)
    ledger = ClaimLedger(reg)
    click.echo(f"  ✓ Root v{reg.version} published")
    click.echo()

    first = snapshot.records[0]
    bundle = result.proof_for(first.token_id)
    click.echo(f"🎟️  Holder of token {first.token_id} claims...")
    ok, reason = ledger.preflight(bundle)
    click.echo(f"  ✓ Pre-flight: {'ok' if ok else reason}")
    record, err = ledger.claim_bundle(bundle)
    click.echo(f"  ✓ Claim: {'accepted' if record else err}")
    _, err = ledger.claim_bundle(bundle)
    click.echo(f"  ✓ Second claim: {err}")
    click.echo()

    click.echo("🔀 Same proof with a packed-encoded leaf...")
    packed = encode_leaf_packed(first.token_id, first.owner)
    click.echo(f"  ✓ Verifies: {verify_proof(packed, bundle.proof, result.root)}")
    click.echo()
    click.echo("✅ Demo complete!")


@cli.command("bench")
@click.option("--leaves", default=1024, type=click.IntRange(2, 1_000_000), help="Tree size to benchmark")
def bench(leaves):
    """Run performance benchmarks"""
    from ogclaim.utils.benchmark import run_all_benchmarks

    run_all_benchmarks(leaf_count=leaves)


if __name__ == "__main__":
    cli()
