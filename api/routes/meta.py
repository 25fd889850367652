from fastapi import APIRouter

from api.schemas import CitiesResponse, City, IndustriesResponse
from config.settings import settings
from models.industry_profiles import registry

router = APIRouter()


@router.get("/api/cities", response_model=CitiesResponse)
def get_cities():
    cities = [City(name=name, lat=c["lat"], lon=c["lon"]) for name, c in settings.CITIES.items()]
    return CitiesResponse(success=True, cities=cities)


@router.get("/api/industries", response_model=IndustriesResponse)
def get_industries():
    return IndustriesResponse(success=True, industries=[profile.to_dict() for profile in registry])
