#!/usr/bin/env python3
"""
Quick Start Guide for the TeamCity DSL.

Builds a small pipeline (a git root, a compile build with a test step and a
VCS trigger, a nightly deploy build in a sub project) and prints the
generated configuration files.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from teamcity_dsl import (
    BuildOptionsProps,
    BuildProps,
    BuildRequirementProps,
    BuildVcsSettingsProps,
    CheckboxSpec,
    CommandLineBuildRunnerProps,
    CronBuildTriggerProps,
    CronExpression,
    Executable,
    GitVcsRootProps,
    ParameterProps,
    Project,
    ProjectProps,
    Script,
    SerializationConfig,
    UploadedSshKeyAuth,
    VcsBuildTriggerProps,
    render_project,
)
from teamcity_dsl.tools import documents_to_json


def pipeline(p: Project) -> None:
    """Declare the example pipeline."""
    repo = p.git_vcs_root(GitVcsRootProps(
        id="App",
        url="git@github.com:acme/app.git",
        auth=UploadedSshKeyAuth(key_name="deploy-key"),
        branch="refs/heads/main",
        branch_spec=["+:refs/heads/*"],
    ))
    version = p.parameter(ParameterProps(name="app.version", value="1.0.%build.counter%"))

    p.build(BuildProps(id="Compile", name="Compile & Test"), lambda b: (
        b.vcs_settings(BuildVcsSettingsProps(vcs_root=repo)),
        b.options(BuildOptionsProps(build_number_format=str(version), artifact_paths=["dist/**"])),
        b.requirement(BuildRequirementProps(id="Linux", name="teamcity.agent.jvm.os.name",
                                            condition="starts-with", value="Linux")),
        b.command_line_runner(CommandLineBuildRunnerProps(
            id="Build", name="Build", command=Executable("make", ["dist"]),
        )),
        b.command_line_runner(CommandLineBuildRunnerProps(
            id="Test", name="Test", command=Script("make test"),
        )),
        b.vcs_trigger(VcsBuildTriggerProps(id="OnPush", quiet_period=60)),
    ))

    p.sub_project(ProjectProps(id="Release"), lambda r: (
        r.parameter(ParameterProps(
            name="deploy.enabled",
            value="false",
            spec=CheckboxSpec(label="Deploy?", checked_value="true", unchecked_value="false"),
        )),
        r.build(BuildProps(id="Deploy"), lambda b: (
            b.vcs_settings(BuildVcsSettingsProps(vcs_root=repo)),
            b.command_line_runner(CommandLineBuildRunnerProps(
                id="Deploy", command=Script("./deploy.sh"),
            )),
            b.cron_trigger(CronBuildTriggerProps(
                id="Nightly",
                cron_expression=CronExpression(
                    second="0", minute="0", hour="2", day_of_month="?", month="*", day_of_week="*"
                ),
            )),
            b.cleanup(lambda c: c.history(keep_builds=50)),
        )),
    ))


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - TeamCity DSL")
    print("=" * 45)

    # Step 1: Build the construct tree
    print("\n🌳 Step 1: Building the project")
    print("-" * 30)

    project = Project(ProjectProps(id="Acme"), pipeline, config=SerializationConfig.pretty())

    print(f"✅ Builds: {[b.props.id for b in project.builds]}")
    print(f"✅ Sub projects: {[s.props.id for s in project.sub_projects]}")
    print(f"🔌 Build extensions: {', '.join(project.builds[0].extensions_for())}")

    # Step 2: Render every document
    print("\n📄 Step 2: Rendering documents")
    print("-" * 30)

    for path, text in render_project(project).items():
        print(f"\n📋 {path}")
        print(text)

    # Step 3: Inspect the JSON projection
    print("\n🧭 Step 3: JSON projection")
    print("-" * 30)

    data = documents_to_json(project.to_xml())
    compile_settings = data[".teamcity/Acme/buildTypes/Compile.xml"]["children"][-1]
    print(f"📊 Compile settings sections: {[c['name'] for c in compile_settings['children']]}")

    print("\n🎉 Quick start complete!")


def main():
    """Main function."""
    try:
        quick_start_example()
    except Exception as e:
        print(f"❌ Error running example: {e}")
        import traceback
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
