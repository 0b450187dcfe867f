import pytest

from coachplan.errors import ConflictError, ValidationError
from coachplan.extensions import db
from coachplan.models import LibraryExercise, PlanTemplate, TemplateBlock, TemplateExercise, User
from coachplan.services import blocks, grouping, plans, templates
from coachplan.services.library import search_library


class TestFolders:

    def test_nested_folders(self, trainer):
        root = templates.create_folder(trainer.id, "Strength")
        child = templates.create_folder(trainer.id, " Upper ", parent_id=root.id)
        assert child.name == "Upper"
        assert child.parent.id == root.id
        assert [f.name for f in templates.list_folders(trainer.id)] == ["Strength", "Upper"]

    def test_parent_must_belong_to_trainer(self, trainer, app):
        other = User(email="other-coach@example.com", name="Other", role="trainer")
        db.session.add(other)
        db.session.commit()
        foreign = templates.create_folder(other.id, "Theirs")
        with pytest.raises(ValidationError):
            templates.create_folder(trainer.id, "Mine", parent_id=foreign.id)
        with pytest.raises(ValidationError):
            templates.create_template(trainer.id, "T", folder_id=foreign.id)


class TestTemplates:

    def test_crud(self, trainer):
        folder = templates.create_folder(trainer.id, "Cardio")
        tmpl = templates.create_template(trainer.id, "Intervals", category="cardio", folder_id=folder.id)
        templates.create_template(trainer.id, "Base")

        assert [t.name for t in templates.list_templates(trainer.id)] == ["Base", "Intervals"]
        assert [t.name for t in templates.list_templates(trainer.id, folder_id=folder.id)] == ["Intervals"]
        assert [t.name for t in templates.list_templates(trainer.id, category="cardio")] == ["Intervals"]

        templates.update_template(tmpl.id, description="Bike work")
        assert templates.get_template(tmpl.id).description == "Bike work"
        with pytest.raises(ValidationError):
            templates.update_template(tmpl.id, name="  ")

        templates.delete_template(tmpl.id)
        assert PlanTemplate.query.count() == 1

    def test_name_required(self, trainer):
        with pytest.raises(ValidationError):
            templates.create_template(trainer.id, "")

    def test_children_are_appended(self, trainer):
        tmpl = templates.create_template(trainer.id, "Full body")
        templates.add_template_block(tmpl.id, "warmup", "start", "Warm", config={"duration_minutes": 5})
        templates.add_template_block(tmpl.id, "cardio", "start", "Bike")
        templates.add_template_block(tmpl.id, "stretch", "end", "Stretch")
        templates.add_template_exercise(tmpl.id, "Squat", sets=3)
        templates.add_template_exercise(tmpl.id, "Lunge")

        data = templates.get_template(tmpl.id).to_dict(include_children=True)
        start = [(b["name"], b["ordinal"]) for b in data["blocks"] if b["position"] == "start"]
        end = [(b["name"], b["ordinal"]) for b in data["blocks"] if b["position"] == "end"]
        assert start == [("Warm", 0), ("Bike", 1)]
        assert end == [("Stretch", 0)]
        assert [(e["name"], e["ordinal"]) for e in data["exercises"]] == [("Squat", 0), ("Lunge", 1)]

    def test_block_config_validated(self, trainer):
        tmpl = templates.create_template(trainer.id, "Cardio")
        with pytest.raises(ValidationError):
            templates.add_template_block(tmpl.id, "cardio", "start", "Bike",
                                         config={"equipment": "spaceship", "modality": "continuous",
                                                 "duration_minutes": 10})
        with pytest.raises(ValidationError):
            templates.add_template_block(tmpl.id, "dance", "start", "Party")
        assert TemplateBlock.query.count() == 0

    def test_delete_refused_while_in_use(self, trainer, athlete, monday):
        tmpl = templates.create_template(trainer.id, "Used")
        plans.apply_template(tmpl.id, athlete.id, trainer.id, [0], week_start=monday)
        with pytest.raises(ConflictError) as exc:
            templates.delete_template(tmpl.id)
        assert exc.value.details == {"plans": 1}


class TestSavePlanAsTemplate:

    def test_snapshot_keeps_structure(self, plan, trainer, add_exercises):
        a, b, c = add_exercises("A", "B", "C")
        grouping.create_group(plan.id, [b.id, c.id], "superset", rest_seconds=30)
        plans.soft_delete_exercise(a.id)
        blocks.create_block(plan.id, "warmup", "start", "Warm", config={"duration_minutes": 5})
        gone = blocks.create_block(plan.id, "other", "end", "Gone")
        blocks.soft_delete(gone.id)

        tmpl = templates.save_plan_as_template(plan.id, trainer.id, "From plan")
        exercises = TemplateExercise.query.filter_by(template_id=tmpl.id).order_by(TemplateExercise.ordinal).all()
        assert [e.name for e in exercises] == ["B", "C"]
        assert exercises[0].group_id == exercises[1].group_id
        assert exercises[0].group_id not in (b.group_id, None)
        assert [e.group_ordinal for e in exercises] == [0, 1]
        assert [blk.name for blk in tmpl.blocks] == ["Warm"]

        # round trip back into a plan keeps the superset
        created = plans.apply_template(tmpl.id, plan.client_id, trainer.id, [5], week_start=plan.week_start)
        units = grouping.materialize(created[0].id)
        assert len(units) == 1 and units[0].kind == "superset"


class TestLibrary:

    def test_search(self, app):
        db.session.add_all([
            LibraryExercise(name="Back Squat", category="strength", is_active=True),
            LibraryExercise(name="Front Squat", category="strength", is_active=True),
            LibraryExercise(name="Squat Jump", category="plyometric", is_active=True),
            LibraryExercise(name="Old Squat", category="strength", is_active=False),
        ])
        db.session.commit()

        assert [e.name for e in search_library("squat")] == ["Back Squat", "Front Squat", "Squat Jump"]
        assert [e.name for e in search_library("squat", category="plyometric")] == ["Squat Jump"]
        assert len(search_library(limit=2)) == 2
