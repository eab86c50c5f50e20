"""
Maps a parsed ``Ability`` onto the host's ``ImportedAbility``.

Import runs in a fixed order: costs, roll, target/distance geometry,
effect, then malice text. Each step reads the parsed ability and writes
onto ``self.imported``; the effect step may replace ``self.imported``
when a template wraps the ability.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..entities import BestiaryEntry, Behavior, EntityKind, ImportedAbility, StandardAbility, UsageLimit
from ..logutils import ImportLog
from ..models import Ability, ActionType, RollType
from ..utils import csv_to_flags

if TYPE_CHECKING:
    from ..host import ImportHost

POWER_ROLL_ABILITY = "Ability Power Roll"
INVOKE_CUSTOM_ABILITY = "InvokeCustom"
MALICE_RESOURCE = "Malice"
VILLAIN_ACTION_RESOURCE = "Villain Action"


class AbilityImporter:
    """Builds one ``ImportedAbility`` from a validated ``Ability``.

    Example:
        importer = AbilityImporter(host, log, entry)
        imported = importer.run(ability)
    """

    def __init__(self, host: "ImportHost", log: ImportLog, context: BestiaryEntry | None = None):
        self.host = host
        self.log = log
        self.context = context
        self.ability: Ability | None = None
        self.imported: ImportedAbility | None = None

    def run(self, ability: Ability) -> ImportedAbility | None:
        """Import *ability*; returns None when it isn't importable."""
        if not ability.is_importable:
            return None

        self.ability = ability
        self.imported = ImportedAbility(
            guid=self.host.generate_identity(),
            name=ability.name,
            keywords=csv_to_flags(ability.keywords),
            categorization=ability.categorization.value,
        )

        self._import_costs()
        self._import_roll()
        self._import_distance_target()
        self._import_effect()
        self._import_malices()

        return self.imported

    def _resource_id(self, name: str) -> str | None:
        resource = self.host.lookup_existing_entity(EntityKind.CHARACTER_RESOURCE, name)
        return getattr(resource, "id", None)

    def _standard_ability(self, name: str) -> StandardAbility | None:
        ability = self.host.lookup_existing_entity(EntityKind.STANDARD_ABILITY, name)
        return ability if isinstance(ability, StandardAbility) else None

    def _import_costs(self) -> None:
        parsed, imported = self.ability, self.imported

        if parsed.cost > 0:
            malice_id = self._resource_id(MALICE_RESOURCE)
            if malice_id:
                imported.resource_cost = malice_id
                imported.resource_number = parsed.cost

        if parsed.action is not None:
            imported.action_resource_id = self._resource_id(parsed.action.value)

        if parsed.villain_action:
            self.log.debug("VILLAINACTION:: %s [%s]", parsed.name, parsed.villain_action)
            imported.villain_action = parsed.villain_action
            imported.usage_limit = UsageLimit(resource_id=self.host.generate_identity())
            imported.action_resource_id = self._resource_id(VILLAIN_ACTION_RESOURCE) or imported.action_resource_id

    def _import_roll(self) -> None:
        roll = self.ability.roll
        if roll is None:
            return

        power_roll = self._standard_ability(POWER_ROLL_ABILITY)
        if power_roll is None:
            self.log.error(f"Unable to get standard '{POWER_ROLL_ABILITY}'.")
            return

        table = roll.roll_table
        for behavior in power_roll.behaviors:
            b = behavior.model_copy(deep=True)
            b.tiers = [table.tier1, table.tier2, table.tier3]

            if roll.type is RollType.POWER:
                b.roll = roll.roll
            elif roll.type is RollType.RESIST and roll.resist_attr:
                b.resistance_roll = True
                b.resistance_attr = roll.resist_attr
                self.log.debug("RESISTROLL:: setting [%s]", roll.resist_attr)
            else:
                self.log.error(f"Misparsed roll in ability [{self.ability.name}].")

            self.imported.behaviors.append(b)

    def _import_distance_target(self) -> None:
        geometry = self.ability.target_distance
        if not geometry.has_geometry:
            return
        for key, value in geometry.model_dump().items():
            setattr(self.imported, key, value)

    def _import_effect(self) -> None:
        parsed = self.ability

        with self.log.section("Importing Ability Effect"):
            if parsed.effect:
                self.imported.description = parsed.effect
                template = self.host.resolve_effect_template(self.context, parsed.name, parsed.effect)

                if template is None:
                    self.log.info("Effect implementation not found.")
                    self.imported.effect_implemented = False
                else:
                    self.log.info(f"Matched known effect [{template.name}].")
                    behaviors = [b.model_copy(deep=True) for b in template.behaviors]
                    if template.invoke_surrounding_ability:
                        self._wrap_in_template(behaviors, template.insert_at_start)
                    elif template.insert_at_start:
                        self.imported.behaviors = behaviors + self.imported.behaviors
                    else:
                        self.imported.behaviors.extend(behaviors)

            if parsed.action is ActionType.TRIGGERED_ACTION and parsed.trigger:
                self.imported.description = f"{self.imported.description}\n**Trigger:** {parsed.trigger}"

    def _wrap_in_template(self, behaviors: list[Behavior], insert_at_start: bool) -> None:
        """Replace the imported ability with the template's, invoking the original.

        With ``insert_at_start`` the template's own behaviors run first and
        the invoked ability last; otherwise the invoked ability runs first.
        """
        inner = self.imported
        wrapper = inner.model_copy(update={"guid": self.host.generate_identity(), "behaviors": behaviors}, deep=True)

        invoke_custom = self._standard_ability(INVOKE_CUSTOM_ABILITY)
        if invoke_custom is None or not invoke_custom.behaviors:
            self.log.error(f"Unable to get standard '{INVOKE_CUSTOM_ABILITY}'.")
            self.imported = wrapper
            return

        invoke = invoke_custom.behaviors[0].model_copy(deep=True)
        invoke.custom_ability = inner.model_copy(update={"guid": self.host.generate_identity()}, deep=True)

        if insert_at_start:
            wrapper.behaviors.append(invoke)
        else:
            wrapper.behaviors.insert(0, invoke)
        self.imported = wrapper

    def _import_malices(self) -> None:
        with self.log.section("Importing Ability Malices"):
            for malice in self.ability.malice:
                self.log.debug("ABILITY:: [%s] ADD MALICE:: [%s]", self.imported.name, malice.name)
                self.imported.description = f"{self.imported.description}\n**{malice.name}:** {malice.description}"
