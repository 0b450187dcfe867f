from datetime import datetime

import pytest

from coachplan.errors import NotFoundError, ValidationError
from coachplan.extensions import db
from coachplan.models import PlanTemplate, TemplateBlock
from coachplan.services import block_presets, blocks

WARMUP = {"duration_minutes": 8, "activities": ["jumping jacks"]}
HIIT = {
    "equipment": "bike", "modality": "hiit", "duration_minutes": 10,
    "work_seconds": 30, "rest_seconds": 30, "rounds": 10,
}


def positions(plan_id, position):
    return [(b.name, b.ordinal) for b in blocks.partition(plan_id, position)]


@pytest.fixture
def start_blocks(plan):
    return [
        blocks.create_block(plan.id, "warmup", "start", name, config=WARMUP, estimated_minutes=5)
        for name in ("W1", "W2", "W3")
    ]


class TestListOrganized:

    def test_partitions_and_summary(self, plan, start_blocks):
        blocks.create_block(plan.id, "stretch", "end", "Stretch", estimated_minutes=7)
        blocks.mark_completed(start_blocks[0].id, True)

        organized = blocks.list_organized(plan.id)
        assert [b.ordinal for b in organized["start"]] == [0, 1, 2]
        assert [b.name for b in organized["end"]] == ["Stretch"]
        assert organized["end"][0].ordinal == 0
        assert organized["summary"] == {
            "count": 4,
            "completed": 1,
            "total_estimated_minutes": 22,
            "by_type": {"warmup": 3, "stretch": 1},
        }

    def test_unknown_plan(self, app):
        with pytest.raises(NotFoundError):
            blocks.list_organized(404)


class TestCreateBlock:

    def test_config_is_validated_per_type(self, plan):
        block = blocks.create_block(plan.id, "cardio", "start", "Bike", config=HIIT)
        assert block.config["rounds"] == 10
        assert blocks.describe(block)["intensity_label"] == "30s on / 30s off x 10"

        with pytest.raises(ValidationError) as exc:
            blocks.create_block(plan.id, "cardio", "start", "Bike", config={"equipment": "bike", "modality": "hiit",
                                                                            "duration_minutes": 10})
        assert "rounds" in exc.value.details

        with pytest.raises(ValidationError):
            blocks.create_block(plan.id, "stretch", "end", "Stretch", config=WARMUP)

    def test_other_blocks_take_free_form_config(self, plan):
        block = blocks.create_block(plan.id, "other", "end", "Foam roll", config={"anything": [1, 2]})
        assert block.config == {"anything": [1, 2]}

    def test_bad_type_or_position(self, plan):
        with pytest.raises(ValidationError):
            blocks.create_block(plan.id, "yoga", "start", "Flow")
        with pytest.raises(ValidationError):
            blocks.create_block(plan.id, "warmup", "middle", "Warm")


class TestReorder:

    def test_assigns_dense_ordinals_in_given_order(self, plan, start_blocks):
        w1, w2, w3 = start_blocks
        blocks.reorder(plan.id, "start", [w3.id, w1.id, w2.id])
        assert positions(plan.id, "start") == [("W3", 0), ("W1", 1), ("W2", 2)]

        blocks.reorder(plan.id, "start", [w2.id, w3.id, w1.id])
        assert positions(plan.id, "start") == [("W2", 0), ("W3", 1), ("W1", 2)]

    @pytest.mark.parametrize("mutate", [
        lambda ids: ids[:-1],
        lambda ids: ids + [9999],
        lambda ids: ids[:2] + [ids[0]],
        lambda ids: [],
    ])
    def test_rejects_mismatched_id_sets(self, plan, start_blocks, mutate):
        ids = [b.id for b in start_blocks]
        with pytest.raises(ValidationError) as exc:
            blocks.reorder(plan.id, "start", mutate(list(reversed(ids))))
        assert exc.value.details["expected"] == sorted(ids)
        assert positions(plan.id, "start") == [("W1", 0), ("W2", 1), ("W3", 2)]

    def test_partitions_are_independent(self, plan, start_blocks):
        end = blocks.create_block(plan.id, "stretch", "end", "Stretch")
        with pytest.raises(ValidationError):
            blocks.reorder(plan.id, "start", [b.id for b in start_blocks] + [end.id])
        blocks.reorder(plan.id, "end", [end.id])
        assert positions(plan.id, "end") == [("Stretch", 0)]


class TestCompletion:

    def test_stamps_and_clears_completed_at(self, plan, start_blocks):
        stamp = datetime(2026, 10, 12, 9, 30)
        block = blocks.mark_completed(start_blocks[0].id, True, now=stamp)
        assert block.completed is True
        assert block.completed_at == stamp

        block = blocks.mark_completed(block.id, True, now=datetime(2026, 10, 12, 10, 0))
        assert block.completed_at == stamp

        block = blocks.mark_completed(block.id, False)
        assert block.completed is False
        assert block.completed_at is None

    def test_does_not_complete_the_plan(self, plan, start_blocks):
        for block in start_blocks:
            blocks.mark_completed(block.id, True)
        assert plan.completed is False


class TestSoftDelete:

    def test_delete_excludes_and_redensifies(self, plan, start_blocks):
        w1, w2, w3 = start_blocks
        blocks.soft_delete(w2.id)

        assert positions(plan.id, "start") == [("W1", 0), ("W3", 1)]
        assert blocks.get_block(w2.id).is_deleted
        with pytest.raises(ValidationError):
            blocks.reorder(plan.id, "start", [w1.id, w2.id, w3.id])
        blocks.reorder(plan.id, "start", [w3.id, w1.id])

    def test_restore_appends_to_partition(self, plan, start_blocks):
        w1, w2, w3 = start_blocks
        blocks.soft_delete(w1.id)
        blocks.restore(w1.id)
        assert positions(plan.id, "start") == [("W2", 0), ("W3", 1), ("W1", 2)]

    def test_delete_is_idempotent(self, plan, start_blocks):
        blocks.soft_delete(start_blocks[0].id)
        blocks.soft_delete(start_blocks[0].id)
        assert positions(plan.id, "start") == [("W2", 0), ("W3", 1)]


class TestInstantiation:

    def test_from_template_block_appends(self, plan, trainer, start_blocks):
        template = PlanTemplate(trainer_id=trainer.id, name="Template")
        db.session.add(template)
        db.session.flush()
        source = TemplateBlock(template_id=template.id, type="warmup", position="start",
                               name="Full Warm-up", estimated_minutes=10)
        db.session.add(source)
        db.session.commit()

        block = blocks.instantiate_from_template(plan.id, source.id, "start")
        assert block.ordinal == 3
        assert block.type == "warmup"
        # missing config is filled from the matching preset
        assert block.config == block_presets.get_preset("warmup-full")["config"]

    def test_from_template_block_into_empty_partition(self, plan, trainer):
        template = PlanTemplate(trainer_id=trainer.id, name="Template")
        db.session.add(template)
        db.session.flush()
        source = TemplateBlock(template_id=template.id, type="cardio", position="start",
                               name="Bike", config=HIIT)
        db.session.add(source)
        db.session.commit()

        block = blocks.instantiate_from_template(plan.id, source.id, "end")
        assert (block.position, block.ordinal) == ("end", 0)
        assert block.config == HIIT

    def test_from_preset(self, plan):
        block = blocks.instantiate_preset(plan.id, "hiit-bike-10x30", "start")
        assert block.name == "HIIT Bike 10x30"
        assert block.estimated_minutes == 10
        with pytest.raises(NotFoundError):
            blocks.instantiate_preset(plan.id, "nope")


class TestPresets:

    def test_filtering(self):
        cardio = block_presets.list_presets(block_type="cardio")
        assert cardio and all(p["type"] == "cardio" for p in cardio)
        assert all(p["popular"] for p in block_presets.list_presets(popular_only=True))

    def test_presets_are_copies(self):
        preset = block_presets.get_preset("warmup-quick")
        preset["config"]["duration_minutes"] = 99
        assert block_presets.get_preset("warmup-quick")["config"]["duration_minutes"] != 99

    def test_hydrate_matches_normalized_name(self):
        config = block_presets.hydrate_config("stretch", "  lower   BODY stretch ", None)
        assert config == block_presets.get_preset("stretch-lower-body")["config"]
        assert block_presets.hydrate_config("stretch", "Unknown", None) is None
        assert block_presets.hydrate_config("stretch", "Lower Body Stretch", {"x": 1}) == {"x": 1}
