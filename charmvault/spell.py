"""
CharmVault Spell Loader

Reads a Charms spell document (version 8) and runs the contract for every
app it references.

    {
      "version": 8,
      "apps": {"$00": "n/<identity hex>/<vk hex>"},
      "ins":  [{"utxo_id": "<txid>:<vout>", "charms": {"$00": {...}}, "sats": 10000}],
      "outs": [{"address": "tb1...", "sats": 8000, "charms": {"$00": {...}}}],
      "private_inputs": {"$00": "<txid>:<vout>"},
      "public_inputs": {}
    }

"sats" on inputs is optional; when every input and output carries it the
transaction gets coin data for payout verification.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from charmvault.config import ValidatorConfig
from charmvault.constants import SPELL_VERSION, SPELL_APP_KEY_PREFIX
from charmvault.core.transaction import App, Charms, Coin, Data, Transaction
from charmvault.core.types import UtxoId
from charmvault.contract.dispatcher import Verdict, verify_spend
from charmvault.errors import InvalidSpellError, InvalidUtxoIdError

logger = logging.getLogger(__name__)


@dataclass
class Spell:
    """Decoded spell: apps by key, the transaction and per-app inputs."""
    apps: Dict[str, App]
    tx: Transaction
    public_inputs: Dict[str, Data] = field(default_factory=dict)
    private_inputs: Dict[str, Data] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, doc: Dict[str, Any]) -> "Spell":
        """
        Build a Spell from its JSON form.

        Raises:
            InvalidSpellError: on any structural problem
        """
        if not isinstance(doc, dict):
            raise InvalidSpellError("document must be an object")

        version = doc.get("version")
        if version != SPELL_VERSION:
            raise InvalidSpellError(f"unsupported version {version!r} (expected {SPELL_VERSION})")

        apps = _parse_apps(doc.get("apps"))

        ins = _as_list(doc.get("ins", []), "ins")
        outs = _as_list(doc.get("outs", []), "outs")

        tx_ins = []
        for i, entry in enumerate(ins):
            if not isinstance(entry, dict):
                raise InvalidSpellError(f"ins[{i}] must be an object")
            try:
                utxo_id = UtxoId.from_str(entry.get("utxo_id"))
            except InvalidUtxoIdError as e:
                raise InvalidSpellError(f"ins[{i}]: {e.message}") from e
            tx_ins.append((utxo_id, _parse_charms(entry.get("charms"), apps, f"ins[{i}]")))

        tx_outs = []
        for i, entry in enumerate(outs):
            if not isinstance(entry, dict):
                raise InvalidSpellError(f"outs[{i}] must be an object")
            tx_outs.append(_parse_charms(entry.get("charms"), apps, f"outs[{i}]"))

        tx = Transaction(
            ins=tx_ins,
            outs=tx_outs,
            coin_ins=_parse_coins(ins, "ins"),
            coin_outs=_parse_coins(outs, "outs"),
        )

        return cls(
            apps=apps,
            tx=tx,
            public_inputs=_parse_inputs(doc.get("public_inputs"), apps, "public_inputs"),
            private_inputs=_parse_inputs(doc.get("private_inputs"), apps, "private_inputs"),
        )


def _as_list(value: Any, name: str) -> List[Any]:
    if not isinstance(value, list):
        raise InvalidSpellError(f"{name} must be a list")
    return value


def _parse_apps(raw: Any) -> Dict[str, App]:
    if not isinstance(raw, dict) or not raw:
        raise InvalidSpellError("apps must be a non-empty object")

    apps = {}
    for key, ref in raw.items():
        if not key.startswith(SPELL_APP_KEY_PREFIX):
            raise InvalidSpellError(f"app key {key!r} must start with {SPELL_APP_KEY_PREFIX!r}")
        if not isinstance(ref, str):
            raise InvalidSpellError(f"app {key} must be a string reference")
        try:
            apps[key] = App.from_str(ref)
        except ValueError as e:
            raise InvalidSpellError(f"app {key}: {e}") from e
    return apps


def _parse_charms(raw: Any, apps: Dict[str, App], where: str) -> Charms:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidSpellError(f"{where}.charms must be an object")

    charms: Charms = {}
    for key, value in raw.items():
        if key not in apps:
            raise InvalidSpellError(f"{where}.charms references unknown app {key!r}")
        charms[apps[key]] = Data(value)
    return charms


def _parse_coins(entries: List[Dict[str, Any]], name: str) -> Optional[List[Coin]]:
    if not entries or not all("sats" in e for e in entries):
        return None

    coins = []
    for i, entry in enumerate(entries):
        sats = entry["sats"]
        if isinstance(sats, bool) or not isinstance(sats, int) or sats < 0:
            raise InvalidSpellError(f"{name}[{i}].sats must be a non-negative integer")
        address = entry.get("address", "")
        if not isinstance(address, str):
            raise InvalidSpellError(f"{name}[{i}].address must be a string")
        coins.append(Coin(address=address, sats=sats))
    return coins


def _parse_inputs(raw: Any, apps: Dict[str, App], name: str) -> Dict[str, Data]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidSpellError(f"{name} must be an object")

    inputs = {}
    for key, value in raw.items():
        if key not in apps:
            raise InvalidSpellError(f"{name} references unknown app {key!r}")
        inputs[key] = Data(value)
    return inputs


def load_spell(path: str) -> Spell:
    """Load a spell document from a JSON file."""
    with open(path, 'r', encoding="utf-8") as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidSpellError(f"not valid JSON: {e}") from e

    spell = Spell.from_dict(doc)
    logger.info(f"Spell loaded from {path}: {len(spell.apps)} app(s)")
    return spell


def verify_spell(spell: Spell, config: Optional[ValidatorConfig] = None) -> Dict[str, Verdict]:
    """Run the contract for every app in the spell."""
    verdicts = {}
    for key, app in spell.apps.items():
        verdicts[key] = verify_spend(
            app,
            spell.tx,
            spell.public_inputs.get(key, Data.empty()),
            spell.private_inputs.get(key, Data.empty()),
            config,
        )
    return verdicts
