"""
Domain models for forest entities.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, databases, etc.). Field
aliases are the backend's camelCase wire names; dates travel as ISO strings.
"""
from typing import Optional
from pydantic import BaseModel, Field


class EntityModel(BaseModel):
    """Common configuration for every forest entity."""
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True
        extra = "allow"


class Animal(EntityModel):
    """Wildlife species tracked in a zone."""
    animal_id: Optional[int] = Field(default=None, alias="animalId")
    name: Optional[str] = None
    scientific_name: Optional[str] = Field(default=None, alias="scientificName")
    species_type: Optional[str] = Field(default=None, alias="speciesType")
    count: Optional[int] = Field(default=None, description="Population count")
    zone: Optional[str] = None
    location: Optional[str] = None
    conservation_status: Optional[str] = Field(default=None, alias="conservationStatus")
    last_sighting_date: Optional[str] = Field(default=None, alias="lastSightingDate")


class Tree(EntityModel):
    """Individual tree or tree stand."""
    tree_id: Optional[int] = Field(default=None, alias="treeId")
    common_name: Optional[str] = Field(default=None, alias="commonName")
    scientific_name: Optional[str] = Field(default=None, alias="scientificName")
    location: Optional[str] = None
    zone: Optional[str] = None
    height_meters: Optional[float] = Field(default=None, alias="heightMeters")
    age_years: Optional[int] = Field(default=None, alias="ageYears")
    diameter_cm: Optional[float] = Field(default=None, alias="diameterCm")
    health_status: Optional[str] = Field(default=None, alias="healthStatus")
    plantation_date: Optional[str] = Field(default=None, alias="plantationDate")
    tree_type: Optional[str] = Field(default=None, alias="treeType")


class Plant(EntityModel):
    """Plant species coverage in a zone."""
    plant_id: Optional[int] = Field(default=None, alias="plantId")
    common_name: Optional[str] = Field(default=None, alias="commonName")
    scientific_name: Optional[str] = Field(default=None, alias="scientificName")
    location: Optional[str] = None
    zone: Optional[str] = None
    plant_type: Optional[str] = Field(default=None, alias="plantType")
    coverage_area_sqm: Optional[float] = Field(default=None, alias="coverageAreaSqm")
    flowering_season: Optional[str] = Field(default=None, alias="floweringSeason")
    medicinal_use: Optional[bool] = Field(default=None, alias="medicinalUse")
    count: Optional[int] = None


class ForestOfficer(EntityModel):
    """Forest department staff member."""
    officer_id: Optional[int] = Field(default=None, alias="officerId")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    employee_id: Optional[str] = Field(default=None, alias="employeeId")
    designation: Optional[str] = None
    department: Optional[str] = None
    assigned_zone: Optional[str] = Field(default=None, alias="assignedZone")
    contact_number: Optional[str] = Field(default=None, alias="contactNumber")
    email: Optional[str] = None
    joining_date: Optional[str] = Field(default=None, alias="joiningDate")
    status: Optional[str] = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Visitor(EntityModel):
    """Visitor entry to the forest."""
    visitor_id: Optional[int] = Field(default=None, alias="visitorId")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    contact_number: Optional[str] = Field(default=None, alias="contactNumber")
    email: Optional[str] = None
    visit_date: Optional[str] = Field(default=None, alias="visitDate")
    entry_time: Optional[str] = Field(default=None, alias="entryTime")
    exit_time: Optional[str] = Field(default=None, alias="exitTime")
    visitor_type: Optional[str] = Field(default=None, alias="visitorType")
    group_size: Optional[int] = Field(default=None, alias="groupSize")
    permit_number: Optional[str] = Field(default=None, alias="permitNumber")
    zone_visited: Optional[str] = Field(default=None, alias="zoneVisited")
    purpose: Optional[str] = None


class OfficerReference(BaseModel):
    """
    Weak reference from a resource to a forest officer.

    Only the identifier is required; the backend may embed the rest of
    the officer record.
    """
    officer_id: int = Field(alias="officerId")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")

    class Config:
        populate_by_name = True
        extra = "allow"


class Resource(EntityModel):
    """Equipment, vehicle or supply held by the department."""
    resource_id: Optional[int] = Field(default=None, alias="resourceId")
    resource_name: Optional[str] = Field(default=None, alias="resourceName")
    resource_type: Optional[str] = Field(default=None, alias="resourceType")
    quantity: Optional[int] = None
    unit: Optional[str] = None
    location: Optional[str] = None
    assigned_zone: Optional[str] = Field(default=None, alias="assignedZone")
    assigned_officer: Optional[OfficerReference] = Field(default=None, alias="assignedOfficer")
    condition_status: Optional[str] = Field(default=None, alias="conditionStatus")
    purchase_date: Optional[str] = Field(default=None, alias="purchaseDate")
    last_maintenance_date: Optional[str] = Field(default=None, alias="lastMaintenanceDate")
    next_maintenance_date: Optional[str] = Field(default=None, alias="nextMaintenanceDate")
    cost: Optional[float] = None


def to_record(entity: BaseModel) -> dict:
    """
    Dump an entity back to its wire form.

    Only fields the backend actually sent (or the caller set) are included,
    so records pass through an update untouched.
    """
    return entity.model_dump(by_alias=True, exclude_unset=True)
