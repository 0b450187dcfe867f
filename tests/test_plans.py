from datetime import date

import pytest

from coachplan.errors import NotFoundError, ValidationError
from coachplan.extensions import db
from coachplan.models import Block, Exercise, LibraryExercise, RestInterval, WeeklyPlan, WorkoutSession
from coachplan.services import blocks, grouping, plans, sessions, templates, weeks
from coachplan.services.grouping import GroupUnit, SingleUnit


@pytest.fixture
def template(trainer):
    tmpl = templates.create_template(trainer.id, "Upper A", description="Push focus")
    templates.add_template_block(tmpl.id, "warmup", "start", "Quick Warm-up", config={"duration_minutes": 5})
    templates.add_template_block(tmpl.id, "stretch", "end", "Upper Body Stretch")
    for name in ("Bench", "Row", "Press"):
        templates.add_template_exercise(tmpl.id, name, sets=3, reps="8")
    bench, row, press = tmpl.exercises
    for index, member in enumerate((bench, row)):
        member.group_id = "tmpl-group"
        member.group_kind = "superset"
        member.group_ordinal = index
        member.group_rest_seconds = 60
    db.session.commit()
    return tmpl


class TestPlanStore:

    def test_create_plan_validates_week_and_day(self, trainer, athlete, monday):
        with pytest.raises(ValidationError):
            plans.create_plan(athlete.id, trainer.id, date(2026, 10, 13), 0)
        with pytest.raises(ValidationError):
            plans.create_plan(athlete.id, trainer.id, monday, 7)

    def test_day_ordinals_increase_per_day(self, trainer, athlete, monday):
        first = plans.create_plan(athlete.id, trainer.id, monday, 2)
        second = plans.create_plan(athlete.id, trainer.id, monday, 2)
        other_day = plans.create_plan(athlete.id, trainer.id, monday, 3)
        assert (first.day_ordinal, second.day_ordinal, other_day.day_ordinal) == (0, 1, 0)

    def test_list_week_groups_by_day(self, trainer, athlete, monday):
        plans.create_plan(athlete.id, trainer.id, monday, 4, name="Fri")
        plans.create_plan(athlete.id, trainer.id, monday, 0, name="Mon 1")
        plans.create_plan(athlete.id, trainer.id, monday, 0, name="Mon 2")
        plans.create_plan(athlete.id, trainer.id, date(2026, 10, 19), 0, name="Next week")

        days = plans.list_week(athlete.id, monday)
        assert sorted(days) == [0, 4]
        assert [p.name for p in days[0]] == ["Mon 1", "Mon 2"]

    def test_update_and_complete(self, plan):
        plans.update_plan(plan.id, name="Heavy legs", notes="go")
        with pytest.raises(ValidationError):
            plans.update_plan(plan.id, client_id=1)
        plans.set_plan_completed(plan.id, True)
        plan = plans.get_plan(plan.id)
        assert (plan.name, plan.notes, plan.completed) == ("Heavy legs", "go", True)

    def test_delete_cascades(self, plan, athlete, add_exercises):
        add_exercises("A")
        blocks.create_block(plan.id, "warmup", "start", "Warm")
        session = sessions.start(plan.id, athlete.id)
        sessions.log_rest_start(session.id, "between_sets")

        plans.delete_plan(plan.id)
        for model in (WeeklyPlan, Exercise, Block, WorkoutSession, RestInterval):
            assert model.query.count() == 0
        with pytest.raises(NotFoundError):
            plans.get_plan(plan.id)


class TestExercises:

    def test_appended_in_order(self, plan, add_exercises):
        exercises = add_exercises("A", "B", "C")
        assert [e.ordinal for e in exercises] == [0, 1, 2]

    def test_name_required(self, plan):
        with pytest.raises(ValidationError):
            plans.add_exercise(plan.id, sets=3)

    def test_library_enrichment(self, plan):
        entry = LibraryExercise(name="Goblet Squat", video_url="https://v/gs", default_sets=4,
                                default_reps="12", category="strength", is_active=True)
        db.session.add(entry)
        db.session.commit()

        exercise = plans.add_exercise(plan.id, library_exercise_id=entry.id, reps="8")
        assert exercise.name == "Goblet Squat"
        assert exercise.sets == 4
        assert exercise.reps == "8"
        assert exercise.video_url == "https://v/gs"

        with pytest.raises(NotFoundError):
            plans.add_exercise(plan.id, library_exercise_id=999)

    def test_update_and_executed_load(self, plan, add_exercises):
        exercise, = add_exercises("Deadlift")
        plans.update_exercise(exercise.id, load="100kg", sets=5)
        plans.record_executed_load(exercise.id, "95kg")
        exercise = db.session.get(Exercise, exercise.id)
        assert (exercise.load, exercise.sets, exercise.executed_load) == ("100kg", 5, "95kg")
        with pytest.raises(ValidationError):
            plans.update_exercise(exercise.id, group_id="x")

    def test_soft_delete_and_restore_keep_ordinals_dense(self, plan, add_exercises):
        a, b, c = add_exercises("A", "B", "C")
        plans.soft_delete_exercise(a.id)
        assert [(e.name, e.ordinal) for e in grouping.live_exercises(plan.id)] == [("B", 0), ("C", 1)]
        plans.restore_exercise(a.id)
        assert [(e.name, e.ordinal) for e in grouping.live_exercises(plan.id)] == [("B", 0), ("C", 1), ("A", 2)]

    def test_soft_delete_shrinks_group(self, plan, add_exercises):
        a, b, c, d = add_exercises("A", "B", "C", "D")
        unit = grouping.create_group(plan.id, [a.id, b.id, c.id], "circuit")

        plans.soft_delete_exercise(b.id)
        members = grouping.group_members(unit.group_id)
        assert [(m.name, m.group_ordinal, m.ordinal) for m in members] == [("A", 0, 0), ("C", 1, 1)]
        assert db.session.get(Exercise, b.id).group_id is None

    def test_soft_delete_breaks_up_biset(self, plan, add_exercises):
        a, b = add_exercises("A", "B")
        unit = grouping.create_group(plan.id, [a.id, b.id], "biset")
        plans.soft_delete_exercise(a.id)
        assert grouping.group_members(unit.group_id) == []


class TestApplyTemplate:

    def test_one_plan_per_day_with_fresh_group_ids(self, template, trainer, athlete, monday):
        created = plans.apply_template(template.id, athlete.id, trainer.id, [2, 0], week_start=monday)
        assert [p.day_of_week for p in created] == [0, 2]

        group_ids = set()
        for plan in created:
            assert plan.template_id == template.id
            assert plan.name == "Upper A"
            units = grouping.materialize(plan.id)
            assert isinstance(units[0], GroupUnit)
            assert [m.name for m in units[0].members] == ["Bench", "Row"]
            assert units[0].rest_seconds == 60
            assert isinstance(units[1], SingleUnit)
            group_ids.add(units[0].group_id)

            organized = blocks.list_organized(plan.id)
            assert [b.name for b in organized["start"]] == ["Quick Warm-up"]
            assert [b.name for b in organized["end"]] == ["Upper Body Stretch"]
            # stretch template block had no config; preset fills it
            assert organized["end"][0].config is not None

        assert len(group_ids) == 2
        assert "tmpl-group" not in group_ids

    def test_replace_existing_reuses_first_plan(self, template, trainer, athlete, monday):
        existing = plans.create_plan(athlete.id, trainer.id, monday, 0, name="Old")
        plans.add_exercise(existing.id, name="Old exercise")
        plans.set_plan_completed(existing.id, True)

        created = plans.apply_template(template.id, athlete.id, trainer.id, [0], week_start=monday)
        assert [p.id for p in created] == [existing.id]
        plan = plans.get_plan(existing.id)
        assert plan.completed is False
        assert [e.name for e in grouping.live_exercises(plan.id)] == ["Bench", "Row", "Press"]

    def test_append_when_not_replacing(self, template, trainer, athlete, monday):
        existing = plans.create_plan(athlete.id, trainer.id, monday, 0)
        created = plans.apply_template(template.id, athlete.id, trainer.id, [0], week_start=monday,
                                       replace_existing=False)
        assert created[0].id != existing.id
        assert created[0].day_ordinal == 1

    def test_defaults_to_active_week(self, template, trainer, athlete):
        weeks.set_active_week(athlete.id, trainer.id, date(2026, 11, 9))
        created = plans.apply_template(template.id, athlete.id, trainer.id, [1])
        assert created[0].week_start == date(2026, 11, 9)

    def test_rejects_bad_days(self, template, trainer, athlete, monday):
        for days in ([], [1, 1], [8]):
            with pytest.raises(ValidationError):
                plans.apply_template(template.id, athlete.id, trainer.id, days, week_start=monday)
        assert WeeklyPlan.query.count() == 0


class TestCopyWeek:

    def test_copies_live_content(self, plan, trainer, athlete, monday, add_exercises):
        a, b, c = add_exercises("A", "B", "C")
        unit = grouping.create_group(plan.id, [a.id, b.id], "superset", rest_seconds=20)
        plans.soft_delete_exercise(c.id)
        sessions.mark_exercise_completed(a.id, True)
        blocks.create_block(plan.id, "warmup", "start", "Warm")

        target = date(2026, 10, 19)
        copies = plans.copy_week(athlete.id, trainer.id, monday, target)
        assert len(copies) == 1
        copy = copies[0]
        assert (copy.week_start, copy.day_of_week, copy.name) == (target, 0, "Leg day")

        units = grouping.materialize(copy.id)
        assert len(units) == 1
        assert units[0].group_id != unit.group_id
        assert [m.name for m in units[0].members] == ["A", "B"]
        assert not any(m.completed for m in units[0].members)
        assert [b.name for b in blocks.list_organized(copy.id)["start"]] == ["Warm"]

    def test_same_week_or_empty_source(self, plan, trainer, athlete, monday):
        with pytest.raises(ValidationError):
            plans.copy_week(athlete.id, trainer.id, monday, monday)
        with pytest.raises(NotFoundError):
            plans.copy_week(athlete.id, trainer.id, date(2026, 9, 7), monday)


class TestPlanDetail:

    def test_detail_shape(self, plan, add_exercises):
        a, b = add_exercises("A", "B")
        grouping.create_group(plan.id, [a.id, b.id], "superset")
        blocks.instantiate_preset(plan.id, "hiit-bike-10x30", "start")

        detail = plans.plan_detail(plan.id)
        assert detail["plan"]["id"] == plan.id
        assert detail["blocks"]["start"][0]["intensity_label"] == "30s on / 30s off x 10"
        assert detail["blocks"]["summary"]["count"] == 1
        assert [u["type"] for u in detail["units"]] == ["group"]
