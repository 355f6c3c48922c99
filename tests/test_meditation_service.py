import pytest

from focusflow.services.meditation_service import MeditationService, breathing_phase


class TestBreathingPhase:
    @pytest.mark.parametrize(
        "elapsed, phase",
        [(0, "inhale"), (3, "inhale"), (4, "hold"), (8, "exhale"), (12, "pause"), (16, "inhale")],
    )
    def test_four_second_phases(self, elapsed, phase):
        assert breathing_phase(elapsed)[0] == phase


class TestMeditationService:
    def test_default_length(self, scheduler):
        service = MeditationService(scheduler)
        assert service.timer.get_snapshot().remaining_seconds == 600

    def test_completion_reports_minutes_and_resets(self, scheduler):
        service = MeditationService(scheduler, minutes=5)
        finished = []
        service.set_on_complete(finished.append)

        service.start()
        scheduler.advance(300)

        assert finished == [5]
        snap = service.timer.get_snapshot()
        assert snap.remaining_seconds == 300
        assert not snap.is_active
        assert scheduler.pending == {}

    def test_select_duration(self, scheduler):
        service = MeditationService(scheduler)
        service.select_duration(20)
        assert service.timer.get_snapshot().remaining_seconds == 1200

    def test_rejects_lengths_outside_catalog(self, scheduler):
        with pytest.raises(ValueError):
            MeditationService(scheduler).select_duration(7)

    def test_cannot_change_length_mid_session(self, scheduler):
        service = MeditationService(scheduler)
        service.start()
        with pytest.raises(ValueError):
            service.select_duration(5)

    def test_breathing_phase_only_while_active(self, scheduler):
        service = MeditationService(scheduler)
        assert service.current_breathing_phase() is None
        service.start()
        scheduler.advance(5)
        assert service.current_breathing_phase()[0] == "hold"

        service.select_type("mindfulness")
        assert service.current_breathing_phase() is None

    def test_unknown_type(self, scheduler):
        with pytest.raises(ValueError):
            MeditationService(scheduler).select_type("yoga")

    def test_stop_abandons_without_logging(self, scheduler):
        service = MeditationService(scheduler)
        finished = []
        service.set_on_complete(finished.append)
        service.start()
        scheduler.advance(30)
        service.stop()
        assert finished == []
        assert service.timer.get_snapshot().remaining_seconds == 600
