"""End-to-end pipeline tests with both providers stubbed at the transport level."""

import httpx
import pytest

from energy_estimator.exceptions import NotFoundError, TransportError, ValidationError
from energy_estimator.services.pipeline import (
    EnergySource,
    EstimationPipeline,
    PipelineState,
    validate_query,
)

from conftest import json_responder, make_energy, make_geocoder


def _pipeline(geo_handler, energy_handler=None, api_key=None):
    geo, geo_transport = make_geocoder(geo_handler)
    energy, energy_transport = make_energy(
        energy_handler or json_responder({}), api_key=api_key
    )
    return EstimationPipeline(geo=geo, energy=energy), geo_transport, energy_transport


class TestScenarios:
    @pytest.mark.asyncio
    async def test_house_address(self, house_candidates):
        pipeline, _, _ = _pipeline(json_responder(house_candidates))

        result = await pipeline.run("123 Main St, Vancouver")

        assert result.property_type == "house"
        assert result.house_size_sqft == 2000
        assert result.window_count == 30
        assert result.address.startswith("123, Main Street")

    @pytest.mark.asyncio
    async def test_postal_code_apartment(self, apartment_candidates):
        pipeline, _, _ = _pipeline(json_responder(apartment_candidates))

        result = await pipeline.run("V6B 1A1")

        assert result.property_type == "apartment"
        assert result.house_size_sqft == 1000
        assert result.window_count == 10

    @pytest.mark.asyncio
    async def test_short_query_makes_no_network_calls(self, house_candidates):
        pipeline, geo_t, energy_t = _pipeline(
            json_responder(house_candidates), api_key="test-key"
        )

        with pytest.raises(ValidationError):
            await pipeline.run("ab")

        assert geo_t.requests == []
        assert energy_t.requests == []
        assert pipeline.state is PipelineState.FAILED

    @pytest.mark.asyncio
    async def test_not_found_skips_energy_lookup(self, eia_payload):
        pipeline, geo_t, energy_t = _pipeline(
            json_responder([]), json_responder(eia_payload), api_key="test-key"
        )

        with pytest.raises(NotFoundError):
            await pipeline.run("Atlantis Blvd")

        assert len(geo_t.requests) == 1
        assert energy_t.requests == []
        assert isinstance(pipeline.outcome, NotFoundError)


class TestEnergyProvenance:
    @pytest.mark.asyncio
    async def test_eia_value_used_when_available(self, house_candidates, eia_payload):
        pipeline, geo_t, energy_t = _pipeline(
            json_responder(house_candidates), json_responder(eia_payload), api_key="test-key"
        )

        result = await pipeline.run("123 Main St, Vancouver")

        assert result.data_source is EnergySource.EIA
        assert result.monthly_energy_kwh == round(8000 * 293071070 * 0.2)
        assert len(geo_t.requests) == 1
        assert len(energy_t.requests) == 1

    @pytest.mark.asyncio
    async def test_fallback_when_energy_provider_fails(self, house_candidates):
        pipeline, _, _ = _pipeline(
            json_responder(house_candidates),
            lambda request: httpx.Response(500),
            api_key="test-key",
        )

        result = await pipeline.run("123 Main St, Vancouver")

        assert result.data_source is EnergySource.ESTIMATED
        assert result.monthly_energy_kwh == 1000

    @pytest.mark.asyncio
    async def test_fallback_when_no_records(self, apartment_candidates):
        pipeline, _, _ = _pipeline(
            json_responder(apartment_candidates),
            json_responder({"response": {"data": []}}),
            api_key="test-key",
        )

        result = await pipeline.run("V6B 1A1")

        assert result.data_source is EnergySource.ESTIMATED
        assert result.monthly_energy_kwh == 500

    @pytest.mark.asyncio
    async def test_derived_energy_fields(self, house_candidates):
        pipeline, _, _ = _pipeline(json_responder(house_candidates))

        result = await pipeline.run("123 Main St, Vancouver")

        assert result.annual_energy_kwh == 12000
        assert result.estimated_monthly_cost == 120
        assert result.meters["windows"].percentage == 100.0
        assert result.meters["energy"].percentage == 50.0
        assert result.meters["energy"].level == "success"


class TestStateAndValidation:
    @pytest.mark.asyncio
    async def test_state_transitions_on_success(self, house_candidates):
        pipeline, _, _ = _pipeline(json_responder(house_candidates))
        assert pipeline.state is PipelineState.IDLE

        result = await pipeline.run("123 Main St")

        assert pipeline.state is PipelineState.SUCCEEDED
        assert pipeline.outcome is result

    @pytest.mark.asyncio
    async def test_pipeline_runs_once(self, house_candidates):
        pipeline, _, _ = _pipeline(json_responder(house_candidates))
        await pipeline.run("123 Main St")

        with pytest.raises(RuntimeError):
            await pipeline.run("123 Main St")

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        pipeline, _, energy_t = _pipeline(refuse, api_key="test-key")

        with pytest.raises(TransportError):
            await pipeline.run("123 Main St")

        assert energy_t.requests == []

    @pytest.mark.asyncio
    async def test_missing_property_type_labelled_residential(self):
        candidates = [{"display_name": "Somewhere", "lat": "1.5", "lon": "2.5"}]
        pipeline, _, _ = _pipeline(json_responder(candidates))

        result = await pipeline.run("Somewhere")

        assert result.property_type == "residential"
        assert result.house_size_sqft == 1800
        assert result.window_count == 22

    @pytest.mark.parametrize("query", ["", "   ", "a", "ab", " ab  "])
    def test_short_queries_rejected(self, query):
        with pytest.raises(ValidationError):
            validate_query(query)

    def test_empty_query_message(self):
        with pytest.raises(ValidationError, match="Address is required"):
            validate_query("  ")

    def test_query_whitespace_collapsed(self):
        assert validate_query("  123   Main St ") == "123 Main St"
