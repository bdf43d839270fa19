"""Field aliases for Form W-2 (Wage and Tax Statement)."""

from __future__ import annotations

from .base import (
    FEDERAL_WITHHOLDING,
    MEDICARE_WAGES,
    SOCIAL_SECURITY_WAGES,
    STATE_WAGES,
    STATE_WITHHOLDING,
    WAGES,
    AddressParts,
    FormSchema,
)
from .documents import DocumentType

SCHEMA = FormSchema(
    document_type=DocumentType.W2,
    issuer_name=("employerName", "Employer.Name", "EmployerName"),
    issuer_tax_id=("employerEIN", "Employer.IdNumber", "Employer.EIN", "EmployerEIN", "EIN", "EmpEIN"),
    issuer_address=("employerAddress", "Employer.Address"),
    recipient_name=("employeeName", "Employee.Name", "EmployeeName"),
    recipient_tax_id=("employeeSSN", "Employee.SSN", "EmployeeSSN", "EmpSSN", "SSN"),
    recipient_address=("employeeAddress", "Employee.Address"),
    recipient_address_parts=AddressParts(
        street=("employeeAddressStreet",),
        city=("employeeCity",),
        state=("employeeState",),
        zip=("employeeZipCode", "employeeZip"),
    ),
    amounts={
        WAGES: (
            "wages",
            "WagesAndTips",
            "wagesAndTips",
            "wages_and_tips",
            "WagesTipsOther",
            "Wages_Tips",
            "box1",
            "W2_Box1",
        ),
        FEDERAL_WITHHOLDING: (
            "federalTaxWithheld",
            "FederalIncomeTaxWithheld",
            "FedIncomeTaxWithheld",
            "federal_tax_withheld",
            "box2",
            "W2_Box2",
        ),
        SOCIAL_SECURITY_WAGES: ("socialSecurityWages", "SocialSecurityWages", "box3", "W2_Box3"),
        MEDICARE_WAGES: ("medicareWages", "MedicareWagesAndTips", "MedicareWages", "box5", "W2_Box5"),
        STATE_WAGES: ("stateWages", "StateWages", "box16", "W2_Box16"),
        STATE_WITHHOLDING: ("stateTaxWithheld", "StateIncomeTax", "box17", "W2_Box17"),
    },
    informational=(SOCIAL_SECURITY_WAGES, MEDICARE_WAGES, STATE_WAGES, STATE_WITHHOLDING),
)
