# studio_enquiries.py — studio booking requests under the "studio-enquiries" key
from enquiries import RecordStore
from schemas import StudioEnquiryCreate
from storage import STUDIO_ENQUIRIES_KEY


class StudioEnquiryStore(RecordStore):
    key = STUDIO_ENQUIRIES_KEY
    schema = StudioEnquiryCreate
    label = "studio_enquiry"

    @property
    def studio_enquiries(self) -> list:
        return list(self.items)

    def add_studio_enquiry(self, data: dict) -> dict:
        return self._add(data)

    def update_studio_enquiry_status(self, enquiry_id: str, status: str):
        return self._update_status(enquiry_id, status)

    def get_studio_enquiries_by_studio(self, studio_name: str) -> list:
        return self._filter("studioName", studio_name)

    def get_studio_enquiries_by_realtor(self, realtor_email: str) -> list:
        return self._filter("realtorEmail", realtor_email)
