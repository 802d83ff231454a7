"""
Unit tests for the dry-run Minecraft client and the thin wrappers on it.
"""

import unittest

from chat_bot.inventory_manager import InventoryManager
from chat_bot.navigation import GoalBlock, GoalNear, Navigator
from integration.mc_client import (
    ActionError,
    ClientConfig,
    ConnectionState,
    MinecraftClient,
    Position,
)
from tests.fakes import spawned_client


class TestClientLifecycle(unittest.TestCase):

    def setUp(self):
        self.client = MinecraftClient(ClientConfig(username="Bot", dry_run=True))
        self.events = []
        for name in ('spawn', 'chat', 'error', 'end'):
            self.client.on_event(name, lambda *args, name=name: self.events.append((name, args)))

    def test_spawn_happens_on_update(self):
        self.assertTrue(self.client.connect())
        self.assertEqual(self.client.state, ConnectionState.CONNECTING)
        self.assertEqual(self.events, [])

        self.client.update()
        self.assertTrue(self.client.is_connected())
        self.assertEqual(self.events, [('spawn', ())])
        self.assertIsNotNone(self.client.get_position())

    def test_connect_twice(self):
        self.client.connect()
        self.assertFalse(self.client.connect())

    def test_chat_is_delivered_in_order(self):
        self.client.connect()
        self.client.update()
        self.client.simulate_chat("Alex", "one")
        self.client.simulate_chat("Alex", "two")
        self.assertEqual(len(self.events), 1)

        self.client.update()
        self.assertEqual(self.events[1:], [
            ('chat', ("Alex", "one")),
            ('chat', ("Alex", "two")),
        ])

    def test_chat_queued_before_spawn_sees_connected_client(self):
        connected = []
        self.client.on_event('chat', lambda *args: connected.append(self.client.is_connected()))
        self.client.connect()
        self.client.simulate_chat("Alex", "early")
        self.client.update()

        self.assertEqual(connected, [True])
        self.assertEqual(self.events, [('spawn', ()), ('chat', ("Alex", "early"))])

    def test_unencodable_host_reports_error_then_end(self):
        client = MinecraftClient(ClientConfig(host="a" * 64 + ".invalid"))
        events = []
        for name in ('spawn', 'error', 'end'):
            client.on_event(name, lambda *args, name=name: events.append(name))

        with self.assertLogs('integration.mc_client', level='ERROR'):
            self.assertFalse(client.connect())
        client.update()

        self.assertEqual(events, ['error', 'end'])
        self.assertEqual(client.state, ConnectionState.DISCONNECTED)

    def test_drop_connection_emits_error_then_end_once(self):
        self.client.connect()
        self.client.update()
        error = ConnectionResetError("reset")
        self.client.drop_connection("timed out", error)
        self.client.update()

        self.assertEqual(self.events[1:], [('error', (error,)), ('end', ("timed out",))])
        self.assertEqual(self.client.state, ConnectionState.DISCONNECTED)
        self.assertIsNone(self.client.get_position())

        self.client.disconnect()
        self.assertEqual(len(self.events), 3)

    def test_send_chat_requires_connection(self):
        self.assertFalse(self.client.send_chat("hi"))
        self.client.connect()
        self.client.update()
        self.assertTrue(self.client.send_chat("hi"))
        self.assertEqual(self.client.sent_messages, ["hi"])

    def test_handler_errors_are_contained(self):
        def boom(*args):
            raise RuntimeError("boom")
        self.client.on_event('spawn', boom)
        self.client.connect()
        with self.assertLogs('integration.mc_client', level='ERROR'):
            self.client.update()
        self.assertTrue(self.client.is_connected())

    def test_auth_mode(self):
        self.assertEqual(ClientConfig().auth_mode, "offline")
        self.assertEqual(ClientConfig(password="x").auth_mode, "microsoft")


class TestClientActions(unittest.TestCase):

    def setUp(self):
        self.client = spawned_client()

    def test_eat_consumes_best_food(self):
        self.client.set_food(10)
        self.client.give_item("apple", 1)
        self.client.give_item("cooked_beef", 2)
        started = []
        self.client.on_event('autoeat_started', lambda: started.append(True))

        self.client.eat()
        self.assertEqual(self.client.get_food(), 18)
        self.assertEqual([i.count for i in self.client.get_inventory_items()], [1, 1])
        self.assertEqual(started, [True])

    def test_eat_without_food(self):
        self.client.give_item("stone", 64)
        with self.assertRaises(ActionError):
            self.client.eat()

    def test_equip_unknown_item(self):
        other = spawned_client().give_item("diamond_sword")
        with self.assertRaises(ActionError):
            self.client.equip(other)

    def test_players(self):
        self.client.add_player("Alice", Position(1, 2, 3))
        self.assertTrue(self.client.get_player("Alice").visible)
        self.assertIsNone(self.client.get_player("alice"))
        self.client.hide_player("Alice")
        self.assertFalse(self.client.get_player("Alice").visible)
        self.client.remove_player("Alice")
        self.assertIsNone(self.client.get_player("Alice"))


class TestNavigator(unittest.TestCase):

    def setUp(self):
        self.client = spawned_client()
        self.navigator = Navigator(self.client)

    def test_move_to_block_floors(self):
        goal = self.navigator.move_to_block(1.7, 64.0, -0.2)
        self.assertEqual(goal, GoalBlock(1, 64, -1))
        self.assertEqual(self.navigator.goal, goal)
        self.assertFalse(self.client.is_goal_dynamic())

    def test_move_near(self):
        goal = self.navigator.move_near(Position(3, 64, 3))
        self.assertEqual(goal, GoalNear(3, 64, 3, 1.0))
        self.assertTrue(self.client.is_goal_dynamic())

    def test_stop(self):
        self.navigator.move_to_block(0, 0, 0)
        self.navigator.stop()
        self.assertIsNone(self.navigator.goal)


class TestInventoryManager(unittest.TestCase):

    def setUp(self):
        self.client = spawned_client()
        self.inventory = InventoryManager(self.client)

    def test_find_item_first_match_in_slot_order(self):
        self.client.give_item("iron_pickaxe")
        self.client.give_item("diamond_pickaxe")
        self.assertEqual(self.inventory.find_item("pickaxe").name, "iron_pickaxe")
        self.assertEqual(self.inventory.find_item("diamond").name, "diamond_pickaxe")
        self.assertIsNone(self.inventory.find_item("Pickaxe"))

    def test_find_item_multi_word_query(self):
        self.client.give_item("oak planks")
        self.assertEqual(self.inventory.find_item("oak planks").name, "oak planks")

    def test_equip_to_hand(self):
        item = self.client.give_item("torch", 16)
        self.inventory.equip_to_hand(item)
        self.assertIs(self.client.get_held_item(), item)


if __name__ == '__main__':
    unittest.main()
