import unittest

from app_autoscaler.scaler import NO_ACTION, SCALE_DOWN, SCALE_UP, decide_scaling_action


class TestScaler(unittest.TestCase):
    """Tests for the scaling decision."""

    def decide(self, current_value, current_size, threshold_up=80, threshold_down=20, max_size=5):
        return decide_scaling_action(
            current_value=current_value,
            threshold_up=threshold_up,
            threshold_down=threshold_down,
            current_size=current_size,
            max_size=max_size
        )

    def test_scale_up_above_threshold(self):
        """Test that a value above the up threshold adds one instance."""
        for size in (1, 2, 4):
            self.assertEqual(self.decide(85, size), SCALE_UP)

    def test_no_scale_up_at_maximum(self):
        """Test that scaling up stops at the maximum size."""
        with self.assertLogs(level='INFO') as logs:
            self.assertEqual(self.decide(95, 5), NO_ACTION)
        self.assertTrue(any('Already at maximum size' in line for line in logs.output))

    def test_no_scale_up_above_maximum(self):
        """Test that a size already beyond the maximum is not increased."""
        self.assertEqual(self.decide(95, 7), NO_ACTION)

    def test_scale_down_below_threshold(self):
        """Test that a value below the down threshold removes one instance."""
        for size in (2, 3, 5):
            self.assertEqual(self.decide(10, size), SCALE_DOWN)

    def test_no_scale_down_at_minimum(self):
        """Test that scaling down stops at one instance."""
        with self.assertLogs(level='INFO') as logs:
            self.assertEqual(self.decide(10, 1), NO_ACTION)
        self.assertTrue(any('Already at minimum size' in line for line in logs.output))

    def test_no_action_within_thresholds(self):
        """Test that values between the thresholds keep the current size."""
        for value in (20.5, 50, 79.9):
            self.assertEqual(self.decide(value, 3), NO_ACTION)

    def test_no_action_at_thresholds(self):
        """Test that values equal to a threshold never scale."""
        self.assertEqual(self.decide(80, 3), NO_ACTION)
        self.assertEqual(self.decide(20, 3), NO_ACTION)

    def test_no_action_for_nan(self):
        """Test that a NaN value (no matching series) never scales."""
        self.assertEqual(self.decide(float('nan'), 3), NO_ACTION)

    def test_decision_is_repeatable(self):
        """Test that the same inputs always give the same decision."""
        decisions = {self.decide(85, 2) for _ in range(10)}
        self.assertEqual(decisions, {SCALE_UP})


if __name__ == '__main__':
    unittest.main()
