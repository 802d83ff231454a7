"""
Unit tests for the idle-motion driver.
"""

import unittest

from chat_bot.idle_motion import JUMP_SECONDS, LOOK_JITTER, IdleMotionDriver
from chat_bot.timers import Scheduler
from tests.fakes import FakeClock, spawned_client


class TestIdleMotionDriver(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.scheduler = Scheduler(self.clock)
        self.client = spawned_client()

    def make_driver(self, interval=60.0):
        return IdleMotionDriver(self.client, self.scheduler, interval, seed=42)

    def test_jump_is_pressed_then_released(self):
        driver = self.make_driver()
        driver.start()

        self.clock.advance(60.0)
        self.scheduler.run_due()
        self.assertTrue(self.client.get_control_state("jump"))

        self.clock.advance(JUMP_SECONDS)
        self.scheduler.run_due()
        self.assertFalse(self.client.get_control_state("jump"))

    def test_look_perturbation_is_small(self):
        driver = self.make_driver()
        driver.start()

        for _ in range(20):
            yaw, pitch = self.client.get_yaw(), self.client.get_pitch()
            self.clock.advance(60.0)
            self.scheduler.run_due()
            self.assertLessEqual(abs(self.client.get_yaw() - yaw), LOOK_JITTER + 1e-9)
            self.assertLessEqual(abs(self.client.get_pitch() - pitch), LOOK_JITTER + 1e-9)

    def test_position_is_unchanged(self):
        before = self.client.get_position().to_tuple()
        driver = self.make_driver()
        driver.start()
        self.clock.advance(60.0)
        self.scheduler.run_due()
        self.assertEqual(self.client.get_position().to_tuple(), before)

    def test_non_positive_interval_disables(self):
        for interval in (0, -5):
            driver = self.make_driver(interval)
            driver.start()
            self.assertFalse(driver.enabled)
            self.assertFalse(driver.running)
        self.assertEqual(self.scheduler.pending(), 0)

    def test_stop_cancels_timer_and_pending_release(self):
        driver = self.make_driver(10.0)
        driver.start()
        self.clock.advance(10.0)
        self.scheduler.run_due()
        self.assertEqual(self.scheduler.pending(), 2)

        driver.stop()
        self.assertFalse(driver.running)
        self.assertEqual(self.scheduler.pending(), 0)

    def test_start_twice_keeps_one_timer(self):
        driver = self.make_driver(10.0)
        driver.start()
        driver.start()
        self.assertEqual(self.scheduler.pending(), 1)

    def test_no_action_when_disconnected(self):
        driver = self.make_driver(10.0)
        driver.start()
        self.client.disconnect()
        self.clock.advance(10.0)
        self.scheduler.run_due()
        self.assertFalse(self.client.get_control_state("jump"))


if __name__ == '__main__':
    unittest.main()
