"""
Schema descriptors for every entity management screen.
"""
from typing import Dict, List

from forest_console.domain.models import (
    Animal,
    ForestOfficer,
    Plant,
    Resource,
    Tree,
    Visitor,
)
from forest_console.domain.schema import (
    EntitySchema,
    FieldKind,
    FieldSpec,
    FilterKind,
    FilterSpec,
    SeverityRule,
    StatKind,
    StatSpec,
)


CONSERVATION_STATUSES = (
    "Endangered",
    "Vulnerable",
    "Near Threatened",
    "Least Concern",
    "Critically Endangered",
)
HEALTH_STATUSES = ("Healthy", "Needs Care", "Diseased", "Dead")
TREE_TYPES = ("Deciduous", "Evergreen", "Coniferous")
OFFICER_STATUSES = ("Active", "Inactive", "On Leave", "Retired")
RESOURCE_TYPES = ("Vehicle", "Equipment", "Tools", "Communication", "Safety Gear")
CONDITION_STATUSES = ("Good", "Fair", "Needs Repair", "Out of Service")


ANIMALS = EntitySchema(
    key="animals",
    title="Animals",
    singular="Animal",
    id_field="animalId",
    zone_field="zone",
    model=Animal,
    title_field="name",
    description="Track wildlife species, population counts, and conservation status",
    fields=(
        FieldSpec("name", "Name", required=True),
        FieldSpec("scientificName", "Scientific Name"),
        FieldSpec("speciesType", "Species Type"),
        FieldSpec("count", "Count", FieldKind.INTEGER, required=True),
        FieldSpec("location", "Location", in_table=False),
        FieldSpec("zone", "Zone", required=True),
        FieldSpec(
            "conservationStatus",
            "Conservation Status",
            FieldKind.ENUM,
            options=CONSERVATION_STATUSES,
            required=True,
            default="",
        ),
        FieldSpec("lastSightingDate", "Last Sighting", FieldKind.DATE),
    ),
    partial_fields=("count", "zone", "conservationStatus"),
    filters=(
        FilterSpec("zone", "Zone", "zone"),
        FilterSpec(
            "conservationStatus",
            "Conservation Status",
            "conservation-status",
            FilterKind.ENUM,
            options=CONSERVATION_STATUSES,
        ),
    ),
    severity=SeverityRule(
        field="conservationStatus",
        tiers={
            "Critically Endangered": "critical",
            "Endangered": "critical",
            "Vulnerable": "warning",
            "Near Threatened": "warning",
            "Least Concern": "ok",
        },
    ),
    stats=(
        StatSpec("Total Species", StatKind.COUNT),
        StatSpec("Total Population", StatKind.SUM, field="count"),
        StatSpec(
            "Endangered Species",
            StatKind.COUNT_MATCHING,
            field="conservationStatus",
            values=("Endangered", "Critically Endangered"),
        ),
    ),
)


TREES = EntitySchema(
    key="trees",
    title="Trees",
    singular="Tree",
    id_field="treeId",
    zone_field="zone",
    model=Tree,
    title_field="commonName",
    description="Monitor tree health, growth, and plantation records",
    fields=(
        FieldSpec("commonName", "Common Name", required=True),
        FieldSpec("scientificName", "Scientific Name"),
        FieldSpec("heightMeters", "Height (m)", FieldKind.DECIMAL),
        FieldSpec("ageYears", "Age (years)", FieldKind.INTEGER),
        FieldSpec("diameterCm", "Diameter (cm)", FieldKind.DECIMAL, in_table=False),
        FieldSpec("location", "Location", in_table=False),
        FieldSpec("zone", "Zone", required=True),
        FieldSpec("treeType", "Tree Type", FieldKind.ENUM, options=TREE_TYPES, default=""),
        FieldSpec(
            "healthStatus",
            "Health Status",
            FieldKind.ENUM,
            options=HEALTH_STATUSES,
            required=True,
            default="Healthy",
        ),
        FieldSpec("plantationDate", "Plantation Date", FieldKind.DATE),
    ),
    filters=(
        FilterSpec("zone", "Zone", "zone"),
        FilterSpec(
            "healthStatus",
            "Health Status",
            "health-status",
            FilterKind.ENUM,
            options=HEALTH_STATUSES,
        ),
    ),
    severity=SeverityRule(
        field="healthStatus",
        tiers={
            "Healthy": "ok",
            "Needs Care": "warning",
            "Diseased": "critical",
            "Dead": "critical",
        },
    ),
    stats=(
        StatSpec("Total Trees", StatKind.COUNT),
        StatSpec("Healthy Trees", StatKind.COUNT_MATCHING, field="healthStatus", values=("Healthy",)),
        StatSpec("Needs Care", StatKind.COUNT_MATCHING, field="healthStatus", values=("Needs Care",)),
        StatSpec("Average Height", StatKind.AVERAGE, field="heightMeters", precision=1, suffix="m"),
    ),
)


PLANTS = EntitySchema(
    key="plants",
    title="Plants",
    singular="Plant",
    id_field="plantId",
    zone_field="zone",
    model=Plant,
    title_field="commonName",
    description="Catalogue plant species, coverage, and medicinal uses",
    fields=(
        FieldSpec("commonName", "Common Name", required=True),
        FieldSpec("scientificName", "Scientific Name"),
        FieldSpec("plantType", "Plant Type"),
        FieldSpec("count", "Count", FieldKind.INTEGER),
        FieldSpec("coverageAreaSqm", "Coverage (sq m)", FieldKind.DECIMAL),
        FieldSpec("floweringSeason", "Flowering Season", in_table=False),
        FieldSpec("location", "Location", in_table=False),
        FieldSpec("zone", "Zone", required=True),
        FieldSpec("medicinalUse", "Medicinal", FieldKind.BOOLEAN),
    ),
    filters=(
        FilterSpec("zone", "Zone", "zone"),
        FilterSpec("medicinal", "Medicinal only", "medicinal", FilterKind.FLAG),
    ),
    stats=(
        StatSpec("Total Plants", StatKind.COUNT),
        StatSpec("Medicinal Plants", StatKind.COUNT_MATCHING, field="medicinalUse", values=(True,)),
        StatSpec("Total Coverage", StatKind.SUM, field="coverageAreaSqm", precision=1, suffix=" sq m"),
    ),
)


OFFICERS = EntitySchema(
    key="officers",
    title="Forest Officers",
    singular="Officer",
    id_field="officerId",
    zone_field="assignedZone",
    model=ForestOfficer,
    title_field="lastName",
    description="Manage forest officers, designations, and zone assignments",
    fields=(
        FieldSpec("firstName", "First Name", required=True),
        FieldSpec("lastName", "Last Name", required=True),
        FieldSpec("employeeId", "Employee ID", required=True),
        FieldSpec("designation", "Designation"),
        FieldSpec("department", "Department", in_table=False),
        FieldSpec("assignedZone", "Zone"),
        FieldSpec("contactNumber", "Contact"),
        FieldSpec("email", "Email", FieldKind.EMAIL, in_table=False),
        FieldSpec("joiningDate", "Joining Date", FieldKind.DATE, in_table=False),
        FieldSpec("status", "Status", FieldKind.ENUM, options=OFFICER_STATUSES, default="Active"),
    ),
    partial_fields=("designation", "assignedZone", "contactNumber", "status"),
    filters=(
        FilterSpec("zone", "Zone", "zone"),
        FilterSpec("active", "Active only", "active", FilterKind.FLAG),
    ),
    severity=SeverityRule(
        field="status",
        tiers={
            "Active": "ok",
            "On Leave": "warning",
            "Inactive": "neutral",
            "Retired": "neutral",
        },
    ),
    stats=(
        StatSpec("Total Officers", StatKind.COUNT),
        StatSpec("Active Officers", StatKind.COUNT_MATCHING, field="status", values=("Active",)),
        StatSpec("Zones Covered", StatKind.DISTINCT, field="assignedZone"),
    ),
)


VISITORS = EntitySchema(
    key="visitors",
    title="Visitors",
    singular="Visitor",
    id_field="visitorId",
    zone_field="zoneVisited",
    model=Visitor,
    title_field="fullName",
    description="Record visitor entries, permits, and zones visited",
    fields=(
        FieldSpec("fullName", "Name", required=True),
        FieldSpec("contactNumber", "Contact"),
        FieldSpec("email", "Email", FieldKind.EMAIL, in_table=False),
        FieldSpec("visitDate", "Visit Date", FieldKind.DATE, required=True),
        FieldSpec("entryTime", "Entry Time", FieldKind.TIME, in_table=False),
        FieldSpec("exitTime", "Exit Time", FieldKind.TIME, in_table=False),
        FieldSpec("visitorType", "Visitor Type"),
        FieldSpec("groupSize", "Group Size", FieldKind.INTEGER, default=1),
        FieldSpec("zoneVisited", "Zone", required=True),
        FieldSpec("permitNumber", "Permit Number"),
        FieldSpec("purpose", "Purpose", in_table=False),
    ),
    filters=(
        FilterSpec("zone", "Zone", "zone"),
        FilterSpec("visitDateRange", "Visit Date Range", "date-range", FilterKind.DATE_RANGE),
        FilterSpec("visitDate", "Visit Date", "date", FilterKind.DATE),
    ),
    stats=(
        StatSpec("Total Visitors", StatKind.COUNT),
        StatSpec("Today's Visitors", StatKind.COUNT_TODAY, field="visitDate"),
        StatSpec("Unique Zones", StatKind.DISTINCT, field="zoneVisited"),
    ),
)


RESOURCES = EntitySchema(
    key="resources",
    title="Resources",
    singular="Resource",
    id_field="resourceId",
    zone_field="assignedZone",
    model=Resource,
    title_field="resourceName",
    description="Track vehicles, equipment, maintenance, and assignments",
    fields=(
        FieldSpec("resourceName", "Name", required=True),
        FieldSpec(
            "resourceType",
            "Type",
            FieldKind.ENUM,
            options=RESOURCE_TYPES,
            required=True,
            default="",
        ),
        FieldSpec("quantity", "Quantity", FieldKind.INTEGER, required=True),
        FieldSpec("unit", "Unit", default="units"),
        FieldSpec("location", "Location", in_table=False),
        FieldSpec("assignedZone", "Zone"),
        FieldSpec(
            "conditionStatus",
            "Condition",
            FieldKind.ENUM,
            options=CONDITION_STATUSES,
            default="Good",
        ),
        FieldSpec("cost", "Cost", FieldKind.DECIMAL, in_table=False),
        FieldSpec("purchaseDate", "Purchase Date", FieldKind.DATE, in_table=False),
        FieldSpec("lastMaintenanceDate", "Last Maintenance", FieldKind.DATE),
        FieldSpec("nextMaintenanceDate", "Next Maintenance", FieldKind.DATE, in_table=False),
        FieldSpec(
            "assignedOfficer",
            "Assigned Officer ID",
            FieldKind.REFERENCE,
            reference_key="officerId",
            default=None,
        ),
    ),
    filters=(
        FilterSpec("zone", "Zone", "zone"),
        FilterSpec("resourceType", "Type", "type", FilterKind.ENUM, options=RESOURCE_TYPES),
    ),
    severity=SeverityRule(
        field="conditionStatus",
        tiers={
            "Good": "ok",
            "Fair": "warning",
            "Needs Repair": "critical",
            "Out of Service": "critical",
        },
    ),
    stats=(
        StatSpec("Total Resources", StatKind.COUNT),
        StatSpec("Total Quantity", StatKind.SUM, field="quantity"),
        StatSpec("Assigned to Officers", StatKind.COUNT_PRESENT, field="assignedOfficer"),
        StatSpec("Resource Types", StatKind.DISTINCT, field="resourceType"),
        StatSpec("Total Cost", StatKind.SUM, field="cost", precision=2),
    ),
)


ENTITY_SCHEMAS: Dict[str, EntitySchema] = {
    schema.key: schema
    for schema in (ANIMALS, TREES, PLANTS, OFFICERS, VISITORS, RESOURCES)
}


def get_schema(key: str) -> EntitySchema:
    """
    Look up the schema of an entity screen.

    Raises:
        KeyError: If no screen is registered under ``key``
    """
    return ENTITY_SCHEMAS[key]


def all_schemas() -> List[EntitySchema]:
    return list(ENTITY_SCHEMAS.values())
