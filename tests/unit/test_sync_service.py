"""
Unit tests for the synchronization strategies
"""

import json

import pytest

from locale_sync.models.document import LocaleDocument
from locale_sync.services.sync_service import BatchStrategy, SingleItemStrategy, SyncService, create_strategy
from locale_sync.utils.errors import SourceLoadError


def make_docs(tmp_path, source_items, target_items, code="fr"):
    source = LocaleDocument(path=str(tmp_path / "en" / "common.json"), code="en", items=dict(source_items))
    target = LocaleDocument(path=str(tmp_path / code / "common.json"), code=code, items=dict(target_items))
    return source, target


def read_json(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


STRATEGIES = [
    pytest.param(lambda t, fm: SingleItemStrategy(t, file_manager=fm), id="single"),
    pytest.param(lambda t, fm: BatchStrategy(t, 2, file_manager=fm), id="batch-2"),
    pytest.param(lambda t, fm: BatchStrategy(t, 50, file_manager=fm), id="batch-50"),
]


class TestSharedBehaviour:
    """Test cases that every strategy must satisfy"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_missing_keys_are_translated(self, build, fake_translator, file_manager, tmp_path):
        """Test that keys absent from the target are translated and saved"""
        source, target = make_docs(tmp_path, {"a": "Hello", "b": "Goodbye"}, {})

        result = await build(fake_translator, file_manager).synchronize(source, target, mode="missing")

        assert target.items == {"a": "T:Hello", "b": "T:Goodbye"}
        assert result.failed == 0
        assert result.translated == 2
        assert result.total == 2
        assert read_json(target.path) == {"a": "T:Hello", "b": "T:Goodbye"}
        assert result.failed_keys_file is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_marker_forces_retranslation_in_full_mode(self, build, fake_translator, file_manager, tmp_path):
        """Test that a '!' prefixed value is retranslated in full mode"""
        source, target = make_docs(tmp_path, {"a": "Hello", "b": "World"}, {"a": "!Bonjour", "b": "Monde"})

        result = await build(fake_translator, file_manager).synchronize(source, target, mode="full")

        assert target.items == {"a": "T:Hello", "b": "Monde"}
        assert result.translated == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_empty_source_values_make_no_calls(self, build, fake_translator, file_manager, tmp_path):
        """Test that empty source values are never sent for translation"""
        source, target = make_docs(tmp_path, {"a": "", "b": ""}, {"a": "keep"})

        result = await build(fake_translator, file_manager).synchronize(source, target, mode="full")

        assert fake_translator.total_calls == 0
        assert target.items == {"a": "keep"}
        assert result.translated == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    @pytest.mark.parametrize("mode", ["full", "missing"])
    async def test_override_wins_without_calls(self, build, mode, fake_translator, file_manager, tmp_path):
        """Test that override values replace existing ones without translation"""
        source, target = make_docs(tmp_path, {"a": "Hello"}, {"a": "!Bonjour"})
        override = LocaleDocument(path="override.json", code="fr", items={"a": "Salut"})

        result = await build(fake_translator, file_manager).synchronize(source, target, override, mode)

        assert target.items["a"] == "Salut"
        assert result.overridden == 1
        assert fake_translator.total_calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_missing_mode_second_run_makes_no_calls(self, build, translator_factory, file_manager, tmp_path):
        """Test that a second missing-mode run over the saved target is a no-op"""
        source_items = {"a": "Hello", "b": "Goodbye", "c": '["x", "y"]'}
        source, target = make_docs(tmp_path, source_items, {})
        await build(translator_factory(), file_manager).synchronize(source, target, mode="missing")

        second = translator_factory()
        reloaded = LocaleDocument.parse_file(target.path, code="fr")
        source, _ = make_docs(tmp_path, source_items, {})
        result = await build(second, file_manager).synchronize(source, reloaded, mode="missing")

        assert second.total_calls == 0
        assert result.translated == 0
        assert reloaded.items == target.items

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    @pytest.mark.parametrize("mode", ["full", "missing"])
    async def test_non_string_values_are_copied_not_translated(self, build, mode, fake_translator, file_manager,
                                                               tmp_path):
        """Test that numbers, booleans and null keep their JSON type and are never translated"""
        source = LocaleDocument.from_mapping(
            {"count": 3, "enabled": True, "nothing": None, "title": "Hi"},
            path=str(tmp_path / "en" / "common.json"),
            code="en"
        )
        target = LocaleDocument.empty(str(tmp_path / "fr" / "common.json"), "fr")

        result = await build(fake_translator, file_manager).synchronize(source, target, mode=mode)

        assert [c[0] for c in fake_translator.calls] + sum(fake_translator.batch_calls, []) == ["Hi"]
        assert read_json(target.path) == {"count": 3, "enabled": True, "nothing": None, "title": "T:Hi"}
        assert result.translated == 1
        assert result.copied == 3
        assert result.failed == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_existing_non_string_target_value_is_kept(self, build, fake_translator, file_manager, tmp_path):
        """Test that a target's own number is left alone even in full mode"""
        source = LocaleDocument.from_mapping({"count": 3}, path=str(tmp_path / "en.json"), code="en")
        target = LocaleDocument.from_mapping({"count": 5}, path=str(tmp_path / "fr.json"), code="fr")

        result = await build(fake_translator, file_manager).synchronize(source, target, mode="full")

        assert fake_translator.total_calls == 0
        assert read_json(target.path) == {"count": 5}
        assert result.copied == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_array_values_keep_length_and_order(self, build, fake_translator, file_manager, tmp_path):
        """Test that array values are translated element-wise in order"""
        source, target = make_docs(tmp_path, {"list": '["a","b"]'}, {})

        await build(fake_translator, file_manager).synchronize(source, target, mode="missing")

        assert json.loads(target.items["list"]) == ["T:a", "T:b"]
        assert read_json(target.path) == {"list": ["T:a", "T:b"]}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_array_element_failure_keeps_prior_value(self, build, translator_factory, file_manager, tmp_path):
        """Test that one failed element leaves the whole array value untouched"""
        translator = translator_factory(empty_on={"b"})
        source, target = make_docs(tmp_path, {"list": '["a","b"]'}, {"list": "!old"})

        result = await build(translator, file_manager).synchronize(source, target, mode="full")

        assert target.items["list"] == "!old"
        assert result.failed_keys == ["list"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_failures_are_persisted_with_sidecar(self, build, translator_factory, file_manager, tmp_path):
        """Test that partial progress is saved and failed keys go to the sidecar file"""
        translator = translator_factory(empty_on={"Goodbye"})
        source, target = make_docs(tmp_path, {"a": "Hello", "b": "Goodbye"}, {"b": "!Au revoir"})

        result = await build(translator, file_manager).synchronize(source, target, mode="full")

        assert read_json(target.path) == {"a": "T:Hello", "b": "!Au revoir"}
        assert result.failed_keys == ["b"]
        assert result.failures[0].target_lang == "French"
        assert result.failed_keys_file == file_manager.failed_keys_path(target.path)
        assert file_manager.read_failed_keys(target.path) == ["b"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build", STRATEGIES)
    async def test_progress_callback(self, build, fake_translator, file_manager, tmp_path):
        """Test that progress is reported once per source key"""
        events = []
        strategy = build(fake_translator, file_manager)
        strategy.progress = lambda *args: events.append(args)
        source, target = make_docs(tmp_path, {"a": "Hello", "b": "", "c": "Bye"}, {})

        await strategy.synchronize(source, target, mode="missing")

        assert [e[1] for e in events] == [1, 2, 3]
        assert all(e[0] == target.path and e[2] == 3 for e in events)


class TestSingleItemStrategy:
    """Test cases for SingleItemStrategy"""

    @pytest.mark.asyncio
    async def test_translation_failure_recorded(self, translator_factory, file_manager, tmp_path):
        """Test that an exhausted translation becomes a failure record"""
        translator = translator_factory(fail_on={"Hello"})
        source, target = make_docs(tmp_path, {"a": "Hello", "b": "Bye"}, {})

        result = await SingleItemStrategy(translator, file_manager=file_manager).synchronize(source, target)

        assert "a" not in target.items
        assert target.items["b"] == "T:Bye"
        assert result.failed_keys == ["a"]
        assert "failed to translate" in result.failures[0].cause

    @pytest.mark.asyncio
    async def test_array_stops_at_first_failed_element(self, translator_factory, file_manager, tmp_path):
        """Test that no further elements are requested after a failure"""
        translator = translator_factory(fail_on={"a"})
        source, target = make_docs(tmp_path, {"list": '["a","b","c"]'}, {})

        result = await SingleItemStrategy(translator, file_manager=file_manager).synchronize(source, target)

        assert [c[0] for c in translator.calls] == ["a"]
        assert result.failed == 1
        assert "list" not in target.items


class TestBatchStrategy:
    """Test cases for BatchStrategy"""

    @pytest.mark.asyncio
    async def test_empty_element_in_second_flush(self, translator_factory, file_manager, tmp_path):
        """Test that an empty element fails only its own key"""
        translator = translator_factory(empty_on={"Three"})
        source, target = make_docs(tmp_path, {"k1": "One", "k2": "Two", "k3": "Three"}, {})

        result = await BatchStrategy(translator, 2, file_manager=file_manager).synchronize(source, target)

        assert len(translator.batch_calls) == 2
        assert target.items == {"k1": "T:One", "k2": "T:Two"}
        assert result.failed_keys == ["k3"]
        assert read_json(target.path) == {"k1": "T:One", "k2": "T:Two"}

    @pytest.mark.asyncio
    async def test_whole_batch_failure_continues_with_next_batch(self, translator_factory, file_manager, tmp_path):
        """Test that a failed batch does not stop later batches"""
        translator = translator_factory(fail_batches={1})
        source, target = make_docs(tmp_path, {"k1": "One", "k2": "Two", "k3": "Three"}, {"k1": "!x"})

        result = await BatchStrategy(translator, 2, file_manager=file_manager).synchronize(source, target, mode="full")

        assert sorted(result.failed_keys) == ["k1", "k2"]
        assert target.items == {"k1": "!x", "k3": "T:Three"}
        assert result.translated == 1

    @pytest.mark.asyncio
    async def test_batches_respect_size(self, fake_translator, file_manager, tmp_path):
        """Test that batches are flushed at the configured size"""
        items = {f"k{i}": f"v{i}" for i in range(5)}
        source, target = make_docs(tmp_path, items, {})

        await BatchStrategy(fake_translator, 2, file_manager=file_manager).synchronize(source, target)

        assert [len(batch) for batch in fake_translator.batch_calls] == [2, 2, 1]

    @pytest.mark.asyncio
    async def test_array_is_not_split_across_batches(self, fake_translator, file_manager, tmp_path):
        """Test that an array's elements always travel in one batch"""
        source, target = make_docs(tmp_path, {"a": "x", "list": '["p","q"]'}, {})

        await BatchStrategy(fake_translator, 2, file_manager=file_manager).synchronize(source, target)

        assert fake_translator.batch_calls == [["x"], ["p", "q"]]

    def test_invalid_batch_size(self, fake_translator):
        """Test that a batch size below one is rejected"""
        with pytest.raises(ValueError):
            BatchStrategy(fake_translator, 0)


class TestStrategyEquivalence:
    """Test that single and batch strategies produce the same target"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("batch_size", [1, 2, 3, 10])
    @pytest.mark.parametrize("mode", ["full", "missing"])
    async def test_single_and_batch_agree(self, batch_size, mode, translator_factory, file_manager, tmp_path):
        """Test equal final maps for every batch size and mode"""
        source_items = {
            "a": "Hello", "b": "", "c": "Same", "d": '["x","y","z"]', "e": "Redo", "f": "New"
        }
        target_items = {"b": "kept", "c": "Same", "d": "", "e": "!Old"}

        single_source, single_target = make_docs(tmp_path / "single", source_items, target_items)
        batch_source, batch_target = make_docs(tmp_path / "batch", source_items, target_items)

        await SingleItemStrategy(translator_factory(), file_manager=file_manager).synchronize(
            single_source, single_target, mode=mode
        )
        await BatchStrategy(translator_factory(), batch_size, file_manager=file_manager).synchronize(
            batch_source, batch_target, mode=mode
        )

        assert single_target.items == batch_target.items


class TestCreateStrategy:
    """Test cases for create_strategy"""

    def test_factory(self, fake_translator):
        """Test strategy selection by batch size"""
        assert isinstance(create_strategy(fake_translator, 0), SingleItemStrategy)
        strategy = create_strategy(fake_translator, 4)
        assert isinstance(strategy, BatchStrategy) and strategy.batch_size == 4
        with pytest.raises(ValueError):
            create_strategy(fake_translator, -1)


class TestSyncService:
    """Test cases for SyncService"""

    @pytest.mark.asyncio
    async def test_run_skips_unreadable_target(self, locale_root, fake_translator, file_manager):
        """Test that a broken target is reported and the run continues"""
        from locale_sync.services.directory_service import scan_directory

        (locale_root / "fr" / "common.json").write_text("{broken", encoding="utf-8")
        pairs = scan_directory(str(locale_root), "en").get_pairs()
        results = []
        service = SyncService(
            SingleItemStrategy(fake_translator, file_manager=file_manager),
            on_result=results.append
        )

        summary = await service.run(pairs)

        assert summary.total_files == 4
        assert summary.completed_files == 3
        assert list(summary.errors) == [str(locale_root / "fr" / "common.json")]
        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_run_skips_target_with_colliding_keys(self, locale_root, fake_translator, file_manager):
        """Test that a target whose keys cannot be saved back is not rewritten"""
        from locale_sync.services.directory_service import scan_directory

        broken = locale_root / "fr" / "common.json"
        broken.write_text('{"greeting": "Bonjour", "greeting/short": "Salut"}', encoding="utf-8")
        pairs = scan_directory(str(locale_root), "en").target_pairs(["fr"])

        summary = await SyncService(SingleItemStrategy(fake_translator, file_manager=file_manager)).run(pairs)

        assert list(summary.errors) == [str(broken)]
        assert "greeting/short" in broken.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_run_stops_on_bad_source(self, locale_root, fake_translator, file_manager):
        """Test that an unreadable source aborts the run"""
        from locale_sync.services.directory_service import scan_directory

        (locale_root / "en" / "common.json").write_text("{broken", encoding="utf-8")
        pairs = scan_directory(str(locale_root), "en").get_pairs()
        service = SyncService(SingleItemStrategy(fake_translator, file_manager=file_manager))

        with pytest.raises(SourceLoadError):
            await service.run(pairs)

    @pytest.mark.asyncio
    async def test_invalid_mode(self, fake_translator, file_manager, tmp_path):
        """Test that an unknown mode is rejected"""
        source, target = make_docs(tmp_path, {"a": "Hello"}, {})

        with pytest.raises(ValueError):
            await SingleItemStrategy(fake_translator, file_manager=file_manager).synchronize(
                source, target, mode="everything"
            )
