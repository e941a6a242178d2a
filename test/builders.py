"""
Builders module behavioral tests (fluent assembly, registration, one-shot builds).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (program and the builder chain).
"""

from __future__ import annotations

import unittest
from unittest import TestCase, mock

from foxcli import (
    program,
    Program,
    Command,
    Option,
    Argument,
    HandlerKind,
    InvalidNameError,
    ConflictError,
    SequenceError,
)


class Deploy:
    def __init__(self):
        self.target = "local"


class TestAssembly(TestCase):

    def testChainReturnsParents(self):
        builder = program("tool")
        self.assertIs(builder.option("verbose", "v", type=bool).build(), builder)
        subcommand = builder.subcommand("deploy")
        self.assertIs(subcommand.option("target").build(), subcommand)
        self.assertIs(subcommand.build(), builder)

    def testFullTree(self):
        grammar = (
            program("tool")
                .description("deployment tool")
                .option("verbose", "v", type=bool).build()
                .subcommand("deploy")
                    .description("deploy the application")
                    .provider(Deploy, invocable=True)
                    .option("target", "t").required().variable("DEPLOY_TARGET").field("target").build()
                    .argument("environment").build()
                    .subcommand("now").build()
                .build()
            .build()
        )
        self.assertIsInstance(grammar, Program)
        self.assertEqual(grammar.name, "tool")
        self.assertEqual(grammar.description, "deployment tool")
        self.assertEqual(list(grammar.options), ["verbose"])

        deploy = grammar.subcommand("deploy")
        self.assertIsInstance(deploy, Command)
        self.assertIs(deploy.kind, HandlerKind.INVOCABLE)
        self.assertIs(deploy.provider, Deploy)
        self.assertEqual(list(deploy.subcommands), ["now"])

        target = deploy.option("t")
        self.assertIsInstance(target, Option)
        self.assertTrue(target.required)
        self.assertEqual(target.variable, "DEPLOY_TARGET")
        self.assertIsInstance(deploy.arguments["environment"], Argument)

    def testFieldBinding(self):
        grammar = (
            program("tool")
                .provider(Deploy)
                .option("target").field("target").build()
            .build()
        )
        option = grammar.option("target")
        handler = Deploy()
        self.assertEqual(option.getter(handler), "local")
        option.setter(handler, "prod")
        self.assertEqual(handler.target, "prod")

    def testFieldRejectsBadAttribute(self):
        builder = program("tool").option("target")
        with self.assertRaises(ValueError):
            builder.field("not an identifier")
        with self.assertRaises(TypeError):
            builder.field(1)

    def testOptionalResetsRequired(self):
        grammar = program("tool").option("target").required().optional().build().build()
        self.assertFalse(grammar.option("target").required)

    def testProgramFlags(self):
        grammar = program("tool").shell().fancy().colorful(False).build()
        self.assertTrue(grammar.shell)
        self.assertTrue(grammar.fancy)
        self.assertFalse(grammar.colorful)


class TestDefaults(TestCase):

    def testProgramNameFromArgv(self):
        with mock.patch("sys.argv", ["/usr/local/bin/deployer.py", "deploy"]):
            self.assertEqual(program().name, "deployer")

    def testProgramNameFallback(self):
        with mock.patch("sys.argv", ["__main__.py"]):
            self.assertEqual(program().name, "foxcli")

    def testArgumentIndexesFollowRegistration(self):
        grammar = (
            program("copy")
                .argument("source").build()
                .argument("target").build()
            .build()
        )
        self.assertEqual(grammar.arguments["source"].index, 1)
        self.assertEqual(grammar.arguments["target"].index, 2)

    def testArgumentIndexAfterExplicitOne(self):
        grammar = (
            program("copy")
                .argument("target", index=2).build()
                .argument("source", index=1).build()
                .argument("mode").build()
            .build()
        )
        self.assertEqual(grammar.arguments["mode"].index, 3)
        self.assertEqual([argument.name for argument in grammar.sequence], ["source", "target", "mode"])


class TestFailures(TestCase):

    def testInvalidNamesFailImmediately(self):
        builder = program("tool")
        with self.assertRaises(InvalidNameError) as context:
            builder.option("-bad")
        self.assertEqual(context.exception.command, "tool")
        with self.assertRaises(InvalidNameError):
            builder.option("good", "-b")
        with self.assertRaises(InvalidNameError):
            builder.argument("two words")
        with self.assertRaises(InvalidNameError):
            builder.subcommand("9lives")
        with self.assertRaises(InvalidNameError):
            program("")

    def testConflictNamesOwner(self):
        builder = program("tool").option("target", "t").build()
        with self.assertRaises(ConflictError) as context:
            builder.option("tag", "t").build()
        self.assertEqual(context.exception.name, "t")
        self.assertEqual(context.exception.command, "tool")

    def testOptionAndArgumentShareNamespace(self):
        builder = program("tool").option("env").build()
        with self.assertRaises(ConflictError) as context:
            builder.argument("env").build()
        self.assertEqual(context.exception.name, "env")
        self.assertEqual(context.exception.command, "tool")

        builder = program("tool").argument("env").build()
        with self.assertRaises(ConflictError):
            builder.option("environment", "env").build()

    def testSubcommandConflict(self):
        builder = program("tool").subcommand("deploy").build()
        with self.assertRaises(ConflictError):
            builder.subcommand("Deploy").build()

    def testArgumentIndexConflict(self):
        builder = program("copy").argument("source", index=1).build()
        with self.assertRaises(ConflictError):
            builder.argument("target", index=1).build()

    def testRequiredAfterOptionalRejectedAtBuild(self):
        builder = (
            program("copy")
                .argument("source").build()
                .argument("target").required().build()
        )
        with self.assertRaises(SequenceError):
            builder.build()

    def testGapRejectedAtBuild(self):
        builder = program("copy").argument("source").build().argument("target", index=3).build()
        with self.assertRaises(SequenceError):
            builder.build()

    def testBuildTwice(self):
        builder = program("tool")
        option = builder.option("target")
        option.build()
        with self.assertRaises(TypeError):
            option.build()
        builder.build()
        with self.assertRaises(TypeError):
            builder.build()

    def testMetadataValidatedAtBuild(self):
        with self.assertRaises(ValueError):
            program("tool").option("target").description("  ").build()
        with self.assertRaises(ValueError):
            program("tool").option("target").variable("A B").build()
        with self.assertRaises(TypeError):
            program("tool").option("target").converter("int").build()

    def testProviderMustBeCallable(self):
        with self.assertRaises(TypeError):
            program("tool").provider("nope")

    def testBindingWithoutProvider(self):
        builder = program("tool").option("target").field("target").build()
        with self.assertRaises(ValueError):
            builder.build()


if __name__ == "__main__":
    unittest.main()
