"""
Pydantic Data Models

Filter criteria, resolved API parameters, parsed result records and widget
construction options. Models accept the camelCase option names used by the
widget as well as their snake_case field names.
"""

from typing import List, Optional, Tuple, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _stringify(value: Any) -> Any:
    """Numeric option values travel to the API as strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


class FilterCriteria(BaseModel):
    """User-facing filter options, fixed for the lifetime of a widget."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    assay_organism: Optional[str] = Field(None, alias="assayOrganism", description="Assay organism, e.g. 'Homo sapiens'")
    target_organism: Optional[str] = Field(None, alias="targetOrganism", description="Target organism")
    activity_type: Optional[str] = Field(None, alias="activity", description="Activity type, e.g. 'IC50'")
    activity_unit: Optional[str] = Field(None, alias="activityUnit", description="Activity unit, e.g. 'nM'")
    activity_condition: Optional[str] = Field(None, alias="activityCondition", description="One of >, <, =, <=, >=")
    activity_value: Optional[str] = Field(None, alias="activityValue", description="Activity value (numeric string)")
    activity_relations: Tuple[str, ...] = Field(default=(), alias="activityRelations",
                                                description="Allowed activity relations, ordered")
    pchembl_condition: Optional[str] = Field(None, alias="pchemblCondition", description="One of >, <, =, <=, >=")
    pchembl_value: Optional[str] = Field(None, alias="pchemblValue", description="pChembl value (numeric string)")
    sort_column: Optional[str] = Field(None, alias="sortBy", description="Column to sort on")
    sort_direction: Optional[str] = Field(None, alias="sortDirection", description="'ascending' or 'descending'")
    lens: Optional[str] = Field(None, description="Scientific lens applied to the results")
    target_type: Optional[str] = Field(None, alias="targetType", description="Target type filter")

    @field_validator("activity_value", "pchembl_value", mode="before")
    @classmethod
    def _numbers_to_str(cls, value: Any) -> Any:
        return _stringify(value)

    @field_validator("activity_relations", mode="before")
    @classmethod
    def _relations_to_tuple(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return tuple(value)


class ResolvedQueryParameters(BaseModel):
    """API-ready filter set derived from FilterCriteria."""
    model_config = ConfigDict(frozen=True)

    assay_organism: Optional[str] = None
    target_organism: Optional[str] = None
    activity_type: Optional[str] = None
    activity_unit: Optional[str] = None

    # At most one of the five activity value fields is set
    activity_value: Optional[str] = None
    min_activity_value: Optional[str] = None
    min_ex_activity_value: Optional[str] = None
    max_activity_value: Optional[str] = None
    max_ex_activity_value: Optional[str] = None

    activity_relation_expr: Optional[str] = None

    # At most one of the five pChembl value fields is set
    pchembl_value: Optional[str] = None
    min_pchembl_value: Optional[str] = None
    min_ex_pchembl_value: Optional[str] = None
    max_pchembl_value: Optional[str] = None
    max_ex_pchembl_value: Optional[str] = None

    target_type: Optional[str] = None
    lens: Optional[str] = None
    sort_expr: Optional[str] = None


class TargetOrganism(BaseModel):
    """Organism entry attached to a pharmacology record."""
    organism: Optional[str] = None


class PharmacologyRecord(BaseModel):
    """One row of target pharmacology results."""
    model_config = ConfigDict(populate_by_name=True)

    activity_uri: Optional[str] = Field(None, alias="activityUri")
    compound_uri: Optional[str] = Field(None, alias="compoundUri")
    compound_pref_label: Optional[str] = Field(None, alias="compoundPrefLabel")
    compound_smiles: Optional[str] = Field(None, alias="compoundSmiles")
    compound_inchi: Optional[str] = Field(None, alias="compoundInchi")
    compound_inchikey: Optional[str] = Field(None, alias="compoundInchikey")
    compound_full_mwt: Optional[float] = Field(None, alias="compoundFullMwt")
    target_title: Optional[str] = Field(None, alias="targetTitle")
    target_organisms: List[TargetOrganism] = Field(default_factory=list, alias="targetOrganisms")
    assay_organism: Optional[str] = Field(None, alias="assayOrganism")
    assay_description: Optional[str] = Field(None, alias="assayDescription")
    activity_activity_type: Optional[str] = Field(None, alias="activityActivityType")
    activity_relation: Optional[str] = Field(None, alias="activityRelation")
    activity_standard_value: Optional[float] = Field(None, alias="activityStandardValue")
    activity_standard_units: Optional[str] = Field(None, alias="activityStandardUnits")
    p_chembl: Optional[float] = Field(None, alias="pChembl")
    pmid: Optional[str] = None

    def to_template_context(self) -> dict:
        """Camel-cased view used by the result templates."""
        return self.model_dump(by_alias=True)


class WidgetOptions(BaseModel):
    """Construction options of the target pharmacology widget."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    app_id: Optional[str] = Field(None, alias="appID")
    app_key: Optional[str] = Field(None, alias="appKey")
    app_url: Optional[str] = Field(None, alias="appURL")
    uri: str = Field(..., alias="URI", description="Target concept URI")
    template: Optional[str] = Field(None, description="Jinja2 template overriding the default table")
    assay_organism: Optional[str] = Field(None, alias="assayOrganism")
    target_organism: Optional[str] = Field(None, alias="targetOrganism")
    activity: Optional[str] = None
    activity_unit: Optional[str] = Field(None, alias="activityUnit")
    activity_condition: Optional[str] = Field(None, alias="activityCondition")
    activity_value: Optional[str] = Field(None, alias="activityValue")
    activity_relations: Tuple[str, ...] = Field(default=(), alias="activityRelations")
    pchembl_value: Optional[str] = Field(None, alias="pchemblValue")
    pchembl_condition: Optional[str] = Field(None, alias="pchemblCondition")
    sort_by: Optional[str] = Field(None, alias="sortBy")
    sort_direction: Optional[str] = Field(None, alias="sortDirection")
    lens: Optional[str] = None
    target_type: Optional[str] = Field(None, alias="targetType")
    page: Optional[int] = None
    page_size: Optional[int] = Field(None, alias="pageSize")
    target: str = Field("YourOwnDivId", description="Placement id the initial table replaces")

    @field_validator("activity_value", "pchembl_value", mode="before")
    @classmethod
    def _numbers_to_str(cls, value: Any) -> Any:
        return _stringify(value)

    @field_validator("activity_relations", mode="before")
    @classmethod
    def _relations_to_tuple(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return tuple(value)

    def to_criteria(self) -> FilterCriteria:
        """Extract the filter criteria these options describe."""
        return FilterCriteria(
            assay_organism=self.assay_organism,
            target_organism=self.target_organism,
            activity_type=self.activity,
            activity_unit=self.activity_unit,
            activity_condition=self.activity_condition,
            activity_value=self.activity_value,
            activity_relations=self.activity_relations,
            pchembl_condition=self.pchembl_condition,
            pchembl_value=self.pchembl_value,
            sort_column=self.sort_by,
            sort_direction=self.sort_direction,
            lens=self.lens,
            target_type=self.target_type,
        )
